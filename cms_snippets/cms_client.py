"""
Resource store backed by the CMS JSON API.

Requests are retried with exponential backoff. When every attempt fails the
lookup degrades to "not found" so that a flaky backend drops markers instead
of breaking the page.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

import requests

from cms_snippets.collaborators import DEFAULT_CHILD_DEPTH
from cms_snippets.models import Resource

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
RETRY_BACKOFF = 1  # seconds, doubles each retry
REQUEST_TIMEOUT = 15
REQUEST_HEADERS = {"Accept": "application/json"}


class HttpResourceStore:
    def __init__(
        self,
        api_url: str,
        max_retries: int = MAX_RETRIES,
        retry_backoff: float = RETRY_BACKOFF,
        timeout_seconds: float = REQUEST_TIMEOUT,
        sleeper: Callable[[float], None] = time.sleep,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff
        self.timeout_seconds = timeout_seconds
        self.sleeper = sleeper
        self._cache: dict[int, Resource | None] = {}

    def get(self, resource_id: int) -> Resource | None:
        if resource_id in self._cache:
            return self._cache[resource_id]
        payload = self._get_json(f"{self.api_url}/resources/{resource_id}")
        resource = None
        if isinstance(payload, dict):
            try:
                resource = Resource.from_dict(payload)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Malformed resource payload for {resource_id}: {e}")
        self._cache[resource_id] = resource
        return resource

    def get_children(self, parent_id: int, depth: int = DEFAULT_CHILD_DEPTH) -> list[int]:
        payload = self._get_json(
            f"{self.api_url}/resources/{parent_id}/children",
            params={"depth": depth},
        )
        if not isinstance(payload, dict):
            return []
        ids: list[int] = []
        for value in payload.get("ids") or []:
            try:
                ids.append(int(value))
            except (TypeError, ValueError):
                logger.warning(f"Ignoring invalid child id {value!r} under {parent_id}")
        return ids

    def render_template_variable(self, name: str, resource_id: int) -> str:
        payload = self._get_json(f"{self.api_url}/resources/{resource_id}/tvs/{name}")
        if not isinstance(payload, dict):
            return ""
        value = payload.get("value")
        return "" if value is None else str(value)

    def _get_json(self, url: str, params: dict[str, object] | None = None) -> object | None:
        for attempt in range(self.max_retries):
            try:
                response = requests.get(
                    url,
                    params=params,
                    headers=REQUEST_HEADERS,
                    timeout=self.timeout_seconds,
                )
                if response.status_code == 404:
                    return None
                response.raise_for_status()
                return response.json()
            except (requests.RequestException, ValueError) as e:
                wait = self.retry_backoff * (2 ** attempt)
                logger.warning(
                    f"Attempt {attempt + 1}/{self.max_retries} failed for {url}: {e}"
                )
                if attempt < self.max_retries - 1:
                    logger.info(f"Retrying in {wait}s...")
                    self.sleeper(wait)
        logger.error(f"All {self.max_retries} attempts failed for {url}")
        return None
