from __future__ import annotations

import json
import math
from typing import Callable

from cms_snippets.models import Coordinate


def normalize_coordinates(raw: object) -> Coordinate | None:
    """Turn a stored coordinate value into a ``Coordinate``.

    Two formats are understood, tried in order: a JSON object carrying
    ``lat`` and ``lng`` (numbers or numeric strings), then a plain
    ``"lat,lng"`` pair. Anything else returns ``None``.
    """
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None

    for parser in COORDINATE_PARSERS:
        coordinate = parser(text)
        if coordinate is not None:
            return coordinate
    return None


def _parse_json_object(text: str) -> Coordinate | None:
    try:
        decoded = json.loads(text)
    except (ValueError, RecursionError):
        return None
    if not isinstance(decoded, dict) or "lat" not in decoded or "lng" not in decoded:
        return None
    return _build(decoded["lat"], decoded["lng"])


def _parse_comma_pair(text: str) -> Coordinate | None:
    if "," not in text:
        return None
    parts = text.split(",")
    if len(parts) != 2:
        return None
    return _build(parts[0].strip(), parts[1].strip())


def _build(lat: object, lng: object) -> Coordinate | None:
    lat_value = _to_float(lat)
    lng_value = _to_float(lng)
    if lat_value is None or lng_value is None:
        return None
    return Coordinate(lat=lat_value, lng=lng_value)


def _to_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


COORDINATE_PARSERS: tuple[Callable[[str], Coordinate | None], ...] = (
    _parse_json_object,
    _parse_comma_pair,
)
