from __future__ import annotations

import html
import logging
from typing import Iterable

from bs4 import BeautifulSoup

from cms_snippets.collaborators import LinkResolver, ResourceRef, TemplateVariableRenderer
from cms_snippets.coordinates import normalize_coordinates
from cms_snippets.models import STANDARD_FIELDS, MarkerDescriptor

logger = logging.getLogger(__name__)

SUBTITLE_MAX_LENGTH = 150
ELLIPSIS = "..."


def resolve_field_value(
    resource: ResourceRef,
    field_name: str,
    tv_renderer: TemplateVariableRenderer,
) -> str:
    """Read a standard resource field directly, anything else as a rendered TV.

    An empty standard field stays empty; it is not retried as a TV.
    """
    if field_name in STANDARD_FIELDS:
        return resource.get_field(field_name) or ""
    return tv_renderer.render_template_variable(field_name, resource.id) or ""


def strip_tags(value: str) -> str:
    if not value:
        return ""
    return BeautifulSoup(value, "html.parser").get_text()


def clean_subtitle(value: str) -> str:
    """Strip markup, then cap at SUBTITLE_MAX_LENGTH characters."""
    text = strip_tags(value)
    if len(text) > SUBTITLE_MAX_LENGTH:
        return text[:SUBTITLE_MAX_LENGTH] + ELLIPSIS
    return text


def escape_text(value: str) -> str:
    return html.escape(value or "", quote=True)


def build_marker(
    resource: ResourceRef,
    coords_field: str,
    title_field: str,
    subtitle_field: str,
    link_resolver: LinkResolver,
    tv_renderer: TemplateVariableRenderer,
) -> MarkerDescriptor | None:
    coordinate = normalize_coordinates(resource.get_template_variable_value(coords_field))
    if coordinate is None:
        logger.debug(f"Resource {resource.id} has no usable '{coords_field}' value, skipping")
        return None

    title = resolve_field_value(resource, title_field, tv_renderer)
    subtitle = clean_subtitle(resolve_field_value(resource, subtitle_field, tv_renderer))
    return MarkerDescriptor(
        lat=coordinate.lat,
        lng=coordinate.lng,
        title=escape_text(title),
        subtitle=escape_text(subtitle),
        link=escape_text(link_resolver.build_link(resource.id)),
    )


def collect_markers(
    resources: Iterable[ResourceRef | None],
    coords_field: str,
    title_field: str,
    subtitle_field: str,
    link_resolver: LinkResolver,
    tv_renderer: TemplateVariableRenderer,
) -> list[MarkerDescriptor]:
    """Build one marker per published resource with a valid coordinate.

    Input order is kept. Missing, unpublished and coordinate-less resources
    are dropped without a placeholder.
    """
    markers: list[MarkerDescriptor] = []
    for resource in resources:
        if resource is None:
            continue
        if not resource.is_published():
            logger.debug(f"Resource {resource.id} is not published, skipping")
            continue
        marker = build_marker(
            resource,
            coords_field,
            title_field,
            subtitle_field,
            link_resolver,
            tv_renderer,
        )
        if marker is not None:
            markers.append(marker)
    return markers
