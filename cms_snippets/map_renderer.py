from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable
import uuid

from jinja2 import Environment, FileSystemLoader, select_autoescape

from cms_snippets.collaborators import DEFAULT_CHILD_DEPTH, CmsHost, ResourceRef
from cms_snippets.markers import build_marker, collect_markers
from cms_snippets.models import MapOptions, MapRenderRequest, MapStatus, MarkerDescriptor, RenderedMap

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
DEFAULT_LEAFLET_VERSION = "1.9.4"

NO_MARKERS_HTML = "<p>No points to display on the map.</p>"
NO_RESOURCE_HTML = "<p>No resource found.</p>"

_ENVIRONMENT = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)


def leaflet_asset_urls(version: str = DEFAULT_LEAFLET_VERSION) -> tuple[str, str]:
    base = f"https://unpkg.com/leaflet@{version}/dist"
    return f"{base}/leaflet.css", f"{base}/leaflet.js"


def new_element_id() -> str:
    return f"cms-map-{uuid.uuid4().hex[:13]}"


def resolve_resource_ids(options: MapOptions, host: CmsHost) -> list[int]:
    if options.resource_ids:
        return list(options.resource_ids)
    if options.parent_id is not None:
        return host.store.get_children(options.parent_id, DEFAULT_CHILD_DEPTH)
    return []


def render_map(
    options: MapOptions,
    host: CmsHost,
    current_resource: ResourceRef | None = None,
    element_id_factory: Callable[[], str] = new_element_id,
    leaflet_version: str = DEFAULT_LEAFLET_VERSION,
) -> RenderedMap:
    """Render the map snippet.

    With ``resource_ids`` or ``parent_id`` set, one marker is drawn per
    matching resource. Otherwise the current resource is shown on its own.
    Every fallback comes back as a ``RenderedMap`` with a non-rendered status
    and informational HTML; nothing is raised for bad content.
    """
    if options.multiple:
        return _render_multiple(options, host, element_id_factory, leaflet_version)
    return _render_single(options, host, current_resource, element_id_factory, leaflet_version)


def _render_multiple(
    options: MapOptions,
    host: CmsHost,
    element_id_factory: Callable[[], str],
    leaflet_version: str,
) -> RenderedMap:
    resource_ids = resolve_resource_ids(options, host)
    resources = [host.store.get(resource_id) for resource_id in resource_ids]
    markers = collect_markers(
        resources,
        options.coords_field,
        options.title_field,
        options.subtitle_field,
        host.link_resolver,
        host.tv_renderer,
    )
    logger.info(f"Collected {len(markers)} markers from {len(resource_ids)} resources")
    if not markers:
        return RenderedMap(status=MapStatus.NO_MARKERS, html=NO_MARKERS_HTML)

    request = _build_request(options, markers, element_id_factory)
    _register_leaflet(host, leaflet_version)
    html = _ENVIRONMENT.get_template("map_multi.html").render(
        map=request,
        markers_json=_markers_json(markers),
    )
    return RenderedMap(status=MapStatus.RENDERED, html=html, request=request)


def _render_single(
    options: MapOptions,
    host: CmsHost,
    current_resource: ResourceRef | None,
    element_id_factory: Callable[[], str],
    leaflet_version: str,
) -> RenderedMap:
    if current_resource is None:
        return RenderedMap(status=MapStatus.NO_RESOURCE, html=NO_RESOURCE_HTML)

    marker = build_marker(
        current_resource,
        options.coords_field,
        options.title_field,
        options.subtitle_field,
        host.link_resolver,
        host.tv_renderer,
    )
    if marker is None:
        return RenderedMap(status=MapStatus.NO_COORDINATES, html="")

    request = _build_request(options, [marker], element_id_factory)
    _register_leaflet(host, leaflet_version)
    html = _ENVIRONMENT.get_template("map_single.html").render(
        map=request,
        marker_json=_script_json(marker.to_dict()),
        has_subtitle=bool(marker.subtitle),
    )
    return RenderedMap(status=MapStatus.RENDERED, html=html, request=request)


def _build_request(
    options: MapOptions,
    markers: list[MarkerDescriptor],
    element_id_factory: Callable[[], str],
) -> MapRenderRequest:
    return MapRenderRequest(
        element_id=element_id_factory(),
        height=options.height,
        width=options.width,
        zoom=options.zoom,
        markers=markers,
    )


def _register_leaflet(host: CmsHost, leaflet_version: str) -> None:
    css_url, js_url = leaflet_asset_urls(leaflet_version)
    host.assets.register_css(css_url)
    host.assets.register_startup_script(js_url)


def _markers_json(markers: list[MarkerDescriptor]) -> str:
    return _script_json([marker.to_dict() for marker in markers])


def _script_json(payload: object) -> str:
    # Keep "</script>" in a link or title from closing the inline script.
    return json.dumps(payload, ensure_ascii=False).replace("</", "<\\/")
