"""Jinja2 wiring that exposes the snippets to page templates.

    {{ resource.tvs.colors | get_value_by_index("index=-1&delimiter=|") }}
    {{ render_map(coordsField="googlemap", parent=5, zoom=12) }}
"""

from __future__ import annotations

from jinja2 import BaseLoader, Environment, select_autoescape
from markupsafe import Markup

from cms_snippets.collaborators import CmsHost, ResourceRef
from cms_snippets.map_renderer import DEFAULT_LEAFLET_VERSION, render_map
from cms_snippets.models import MapOptions
from cms_snippets.value_index import extract_value_by_index


def build_environment(
    host: CmsHost,
    current_resource: ResourceRef | None = None,
    loader: BaseLoader | None = None,
    leaflet_version: str = DEFAULT_LEAFLET_VERSION,
) -> Environment:
    environment = Environment(loader=loader, autoescape=select_autoescape(["html"]))
    install_snippets(environment, host, current_resource, leaflet_version)
    return environment


def install_snippets(
    environment: Environment,
    host: CmsHost,
    current_resource: ResourceRef | None = None,
    leaflet_version: str = DEFAULT_LEAFLET_VERSION,
) -> None:
    def _render_map(**properties: object) -> Markup:
        options = MapOptions.from_properties(properties)
        result = render_map(options, host, current_resource, leaflet_version=leaflet_version)
        return Markup(result.html)

    environment.filters["get_value_by_index"] = extract_value_by_index
    environment.globals["render_map"] = _render_map
