from __future__ import annotations

from dataclasses import replace
import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.templating import Jinja2Templates

from cms_snippets.cms_client import HttpResourceStore
from cms_snippets.collaborators import (
    ClientAssets,
    CmsHost,
    JsonResourceStore,
    ResourceSource,
)
from cms_snippets.config import load_settings
from cms_snippets.map_renderer import DEFAULT_LEAFLET_VERSION, TEMPLATES_DIR, render_map
from cms_snippets.models import MapOptions
from cms_snippets.value_index import extract_value_by_index

logger = logging.getLogger(__name__)

TEMPLATES = Jinja2Templates(directory=str(TEMPLATES_DIR))


def create_app(
    data_file: Path,
    site_url: str,
    api_url: str | None = None,
    leaflet_version: str = DEFAULT_LEAFLET_VERSION,
) -> FastAPI:
    app = FastAPI(title="CMS Snippets Preview")
    app.state.data_file = data_file
    app.state.site_url = site_url
    app.state.api_url = api_url
    app.state.leaflet_version = leaflet_version

    def _host(assets: ClientAssets) -> CmsHost:
        store: ResourceSource
        if app.state.api_url:
            store = HttpResourceStore(app.state.api_url)
        else:
            store = JsonResourceStore.from_file(app.state.data_file)
        return CmsHost.from_store(store, app.state.site_url, assets)

    def _page(request: Request, title: str, assets: ClientAssets, body: str):
        context = {"title": title, "head": assets.head_html(), "body": body}
        return TEMPLATES.TemplateResponse(request=request, name="page.html", context=context)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/filters/value-by-index")
    def value_by_index(input: str = "", options: str = "") -> dict[str, str]:
        return {"value": extract_value_by_index(input, options)}

    @app.get("/map")
    def map_page(request: Request):
        assets = ClientAssets()
        host = _host(assets)
        options = MapOptions.from_properties(dict(request.query_params))
        result = render_map(options, host, leaflet_version=app.state.leaflet_version)
        logger.info(f"Map preview rendered with status {result.status.value}")
        return _page(request, "Map", assets, result.html)

    @app.get("/resources/{resource_id}")
    def resource_page(resource_id: int, request: Request):
        assets = ClientAssets()
        host = _host(assets)
        current = host.store.get(resource_id)
        # A resource page always shows its own marker.
        options = replace(
            MapOptions.from_properties(dict(request.query_params)),
            resource_ids=(),
            parent_id=None,
        )
        result = render_map(options, host, current, leaflet_version=app.state.leaflet_version)
        title = current.get_field("pagetitle") if current is not None else "Resource"
        return _page(request, title or "Resource", assets, result.html)

    return app


_settings = load_settings()
app = create_app(
    data_file=_settings.data_file,
    site_url=_settings.site_url,
    api_url=_settings.api_url,
    leaflet_version=_settings.leaflet_version,
)
