"""
Output filter that picks one value out of a delimited string.

    extract_value_by_index("pomme;orange;banane", "1")                -> "orange"
    extract_value_by_index("pomme|orange|banane", "index=-1&delimiter=|") -> "banane"

Options are either a bare number (the index) or ``key=value`` pairs joined
with ``&``. Recognised keys are ``index``, ``delimiter`` and ``default``.
Malformed input never raises; it falls back to the default value instead.
"""

from __future__ import annotations

import re

from cms_snippets.models import OptionSet

DEFAULT_OPTIONS = OptionSet()

_NUMERIC_RE = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_index_options(options: object) -> OptionSet:
    if options is None:
        return DEFAULT_OPTIONS
    text = str(options)
    if not text.strip():
        return DEFAULT_OPTIONS

    # A bare number is the simple form and wins over key=value parsing.
    if _NUMERIC_RE.match(text):
        return OptionSet(index=_numeric_to_int(text))

    params: dict[str, str] = {}
    for fragment in text.split("&"):
        parts = fragment.split("=")
        if len(parts) != 2:
            continue
        params[parts[0].strip()] = parts[1].strip()

    return OptionSet(
        index=_leading_int(params["index"]) if "index" in params else DEFAULT_OPTIONS.index,
        delimiter=params.get("delimiter") or DEFAULT_OPTIONS.delimiter,
        default=params.get("default", DEFAULT_OPTIONS.default),
    )


def extract_value_by_index(value: object, options: object = None) -> str:
    if value is None or value == "":
        return ""
    text = str(value)

    parsed = parse_index_options(options)
    values = [part.strip() for part in text.split(parsed.delimiter)]

    index = parsed.index
    if index < 0:
        index = len(values) + index

    if 0 <= index < len(values):
        return values[index]
    return parsed.default


def _numeric_to_int(text: str) -> int:
    try:
        return int(float(text))
    except (OverflowError, ValueError):
        return 0


def _leading_int(text: str) -> int:
    match = _LEADING_INT_RE.match(text)
    if not match:
        return 0
    try:
        return int(match.group(1))
    except ValueError:
        return 0
