"""Shared fixtures for snippet tests."""

import json
from pathlib import Path

import pytest

from cms_snippets.collaborators import CmsHost, JsonResourceStore
from cms_snippets.models import Resource

SITE_URL = "https://example.org/"

LONG_INTRO = "<p>" + ("Lorem ipsum <em>dolor</em> sit amet. " * 10) + "</p>"

RESOURCE_RECORDS = [
    {
        "id": 5,
        "parent": 0,
        "published": True,
        "uri": "agences/",
        "pagetitle": "Nos agences",
    },
    {
        "id": 12,
        "parent": 5,
        "published": True,
        "uri": "agences/paris.html",
        "pagetitle": "Agence de Paris",
        "introtext": "<p>Au coeur du <strong>1er</strong>.</p>",
        "tvs": {"googlemap": '{"lat": "48.85", "lng": "2.35"}', "horaires": "9h-18h"},
    },
    {
        "id": 45,
        "parent": 5,
        "published": True,
        "uri": "agences/lyon.html",
        "pagetitle": "L'agence \"Lyon\"",
        "introtext": LONG_INTRO,
        "tvs": {"googlemap": "45.76,4.83"},
    },
    {
        "id": 67,
        "parent": 5,
        "published": False,
        "pagetitle": "Agence de Lille",
        "tvs": {"googlemap": "50.62,3.05"},
    },
    {
        "id": 89,
        "parent": 5,
        "published": True,
        "pagetitle": "Agence de Nantes",
        "tvs": {"googlemap": "invalid"},
    },
    {
        "id": 90,
        "parent": 89,
        "published": True,
        "uri": "agences/nantes/centre.html",
        "pagetitle": "Nantes centre",
        "tvs": {"googlemap": "47.21,-1.55"},
    },
]


def make_store(records=None):
    """Helper to build an in-memory store from resource records."""
    records = RESOURCE_RECORDS if records is None else records
    return JsonResourceStore(Resource.from_dict(item) for item in records)


@pytest.fixture
def store():
    return make_store()


@pytest.fixture
def site_url():
    return SITE_URL


@pytest.fixture
def host(store, site_url):
    return CmsHost.from_store(store, site_url)


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    path = tmp_path / "data" / "resources.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(RESOURCE_RECORDS), encoding="utf-8")
    return path
