from __future__ import annotations

from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Mapping

DEFAULT_COORDS_FIELD = "googlemap"
DEFAULT_HEIGHT = "350px"
DEFAULT_WIDTH = "100%"
DEFAULT_TITLE_FIELD = "pagetitle"
DEFAULT_SUBTITLE_FIELD = "introtext"
DEFAULT_ZOOM = 13

STANDARD_FIELDS = ("pagetitle", "longtitle", "introtext", "content", "description", "menutitle")


@dataclass(frozen=True, slots=True)
class OptionSet:
    index: int = 0
    delimiter: str = ";"
    default: str = ""


@dataclass(frozen=True, slots=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class MarkerDescriptor:
    lat: float
    lng: float
    title: str
    subtitle: str
    link: str

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass(slots=True)
class MapRenderRequest:
    element_id: str
    height: str
    width: str
    zoom: int
    markers: list[MarkerDescriptor] = field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        return {
            "elementId": self.element_id,
            "height": self.height,
            "width": self.width,
            "zoom": self.zoom,
            "markers": [marker.to_dict() for marker in self.markers],
        }


class MapStatus(str, Enum):
    RENDERED = "rendered"
    NO_MARKERS = "no_markers"
    NO_RESOURCE = "no_resource"
    NO_COORDINATES = "no_coordinates"


@dataclass(slots=True)
class RenderedMap:
    status: MapStatus
    html: str
    request: MapRenderRequest | None = None

    @property
    def rendered(self) -> bool:
        return self.status is MapStatus.RENDERED


@dataclass(frozen=True, slots=True)
class MapOptions:
    coords_field: str = DEFAULT_COORDS_FIELD
    height: str = DEFAULT_HEIGHT
    width: str = DEFAULT_WIDTH
    title_field: str = DEFAULT_TITLE_FIELD
    subtitle_field: str = DEFAULT_SUBTITLE_FIELD
    resource_ids: tuple[int, ...] = ()
    parent_id: int | None = None
    zoom: int = DEFAULT_ZOOM

    @property
    def multiple(self) -> bool:
        return bool(self.resource_ids) or self.parent_id is not None

    @classmethod
    def from_properties(cls, properties: Mapping[str, object]) -> "MapOptions":
        """Build options from snippet-style properties.

        Accepts the camelCase names used in page templates (``coordsField``,
        ``titleField``, ``resources``, ``parent``...) as well as the legacy
        ``coordsTV``. Blank or malformed values fall back to the defaults.
        """
        coords_field = _text(properties.get("coordsField")) or _text(properties.get("coordsTV"))
        return cls(
            coords_field=coords_field or DEFAULT_COORDS_FIELD,
            height=_text(properties.get("height")) or DEFAULT_HEIGHT,
            width=_text(properties.get("width")) or DEFAULT_WIDTH,
            title_field=_text(properties.get("titleField")) or DEFAULT_TITLE_FIELD,
            subtitle_field=_text(properties.get("subtitleField")) or DEFAULT_SUBTITLE_FIELD,
            resource_ids=parse_id_list(properties.get("resources")),
            parent_id=_parse_id(properties.get("parent")),
            zoom=_parse_zoom(properties.get("zoom")),
        )


@dataclass(slots=True)
class Resource:
    id: int
    parent: int = 0
    published: bool = True
    uri: str = ""
    fields: dict[str, str] = field(default_factory=dict)
    tvs: dict[str, str] = field(default_factory=dict)

    def is_published(self) -> bool:
        return self.published

    def get_field(self, name: str) -> str:
        return self.fields.get(name) or ""

    def get_template_variable_value(self, name: str) -> str:
        return self.tvs.get(name) or ""

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "id": self.id,
            "parent": self.parent,
            "published": self.published,
            "uri": self.uri,
        }
        payload.update(self.fields)
        payload["tvs"] = dict(self.tvs)
        return payload

    @classmethod
    def from_dict(cls, item: Mapping[str, object]) -> "Resource":
        tvs = item.get("tvs") or {}
        return cls(
            id=int(item["id"]),
            parent=int(item.get("parent") or 0),
            published=bool(item.get("published", True)),
            uri=str(item.get("uri") or ""),
            fields={name: str(item[name]) for name in STANDARD_FIELDS if item.get(name) is not None},
            tvs={str(key): "" if value is None else str(value) for key, value in dict(tvs).items()},
        )


def parse_id_list(value: object) -> tuple[int, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        parts = [str(item) for item in value]
    else:
        parts = str(value).split(",")
    ids = [_parse_id(part) for part in parts]
    return tuple(item for item in ids if item is not None)


def _parse_id(value: object) -> int | None:
    cleaned = _text(value)
    if not (cleaned.isascii() and cleaned.isdigit()):
        return None
    try:
        parsed = int(cleaned)
    except ValueError:
        return None
    return parsed or None


def _parse_zoom(value: object) -> int:
    cleaned = _text(value)
    try:
        return int(cleaned)
    except ValueError:
        return DEFAULT_ZOOM


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()
