"""Host-side collaborators the snippets call into.

The protocols describe the narrow slice of the CMS API the snippets need.
The concrete classes back them with a local JSON export so the snippets can
run outside a live CMS (CLI, preview server, tests).
"""

from __future__ import annotations

from dataclasses import dataclass, field
import html
import json
import logging
from pathlib import Path
from typing import Iterable, Protocol
from urllib.parse import quote, urlencode, urljoin

from cms_snippets.models import Resource

logger = logging.getLogger(__name__)

DEFAULT_CHILD_DEPTH = 10


class ResourceRef(Protocol):
    id: int

    def is_published(self) -> bool: ...

    def get_field(self, name: str) -> str: ...

    def get_template_variable_value(self, name: str) -> str: ...


class ResourceStore(Protocol):
    def get(self, resource_id: int) -> ResourceRef | None: ...

    def get_children(self, parent_id: int, depth: int = DEFAULT_CHILD_DEPTH) -> list[int]: ...


class TemplateVariableRenderer(Protocol):
    def render_template_variable(self, name: str, resource_id: int) -> str: ...


class LinkResolver(Protocol):
    def build_link(self, resource_id: int) -> str: ...


class AssetRegistry(Protocol):
    def register_css(self, url: str) -> None: ...

    def register_startup_script(self, url: str) -> None: ...


class ResourceSource(ResourceStore, TemplateVariableRenderer, Protocol):
    """A store that can also render template variables for its resources."""


class JsonResourceStore:
    """Resource store over a JSON list of resource records."""

    def __init__(self, resources: Iterable[Resource]) -> None:
        self._resources: dict[int, Resource] = {}
        for resource in resources:
            self._resources[resource.id] = resource

    @classmethod
    def from_file(cls, path: Path) -> "JsonResourceStore":
        if not path.exists():
            logger.warning(f"Resource file {path} not found, using an empty store")
            return cls([])
        payload = json.loads(path.read_text(encoding="utf-8"))
        return cls(Resource.from_dict(item) for item in payload)

    def __len__(self) -> int:
        return len(self._resources)

    def get(self, resource_id: int) -> Resource | None:
        return self._resources.get(resource_id)

    def get_children(self, parent_id: int, depth: int = DEFAULT_CHILD_DEPTH) -> list[int]:
        """Return descendant ids, depth-first, in file order within a level."""
        if depth <= 0:
            return []
        ids: list[int] = []
        for resource in self._resources.values():
            if resource.parent != parent_id or resource.id == parent_id:
                continue
            ids.append(resource.id)
            ids.extend(self.get_children(resource.id, depth - 1))
        return ids

    def render_template_variable(self, name: str, resource_id: int) -> str:
        resource = self._resources.get(resource_id)
        if resource is None:
            return ""
        return resource.get_template_variable_value(name)


class SiteLinkResolver:
    """Builds absolute page URLs from the resource URI or its id."""

    def __init__(self, store: ResourceStore, site_url: str) -> None:
        self.store = store
        self.site_url = site_url if site_url.endswith("/") else f"{site_url}/"

    def build_link(self, resource_id: int) -> str:
        resource = self.store.get(resource_id)
        uri = getattr(resource, "uri", "") if resource is not None else ""
        if uri:
            return urljoin(self.site_url, quote(uri.lstrip("/"), safe="/"))
        return f"{self.site_url}index.php?{urlencode({'id': resource_id})}"


@dataclass(slots=True)
class ClientAssets:
    """Collects stylesheet and script URLs to inject into the page head."""

    css: list[str] = field(default_factory=list)
    scripts: list[str] = field(default_factory=list)

    def register_css(self, url: str) -> None:
        if url not in self.css:
            self.css.append(url)

    def register_startup_script(self, url: str) -> None:
        if url not in self.scripts:
            self.scripts.append(url)

    def head_html(self) -> str:
        tags = [f'<link rel="stylesheet" href="{html.escape(url)}">' for url in self.css]
        tags.extend(f'<script src="{html.escape(url)}"></script>' for url in self.scripts)
        return "\n".join(tags)


@dataclass(slots=True)
class CmsHost:
    store: ResourceStore
    tv_renderer: TemplateVariableRenderer
    link_resolver: LinkResolver
    assets: AssetRegistry

    @classmethod
    def from_store(
        cls,
        store: ResourceSource,
        site_url: str,
        assets: AssetRegistry | None = None,
    ) -> "CmsHost":
        return cls(
            store=store,
            tv_renderer=store,
            link_resolver=SiteLinkResolver(store, site_url),
            assets=ClientAssets() if assets is None else assets,
        )
