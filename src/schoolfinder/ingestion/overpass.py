"""
Overpass API executor with ordered mirror fallback.

Mirrors are tried strictly one after another, one attempt each. The first
mirror that answers with a well-formed JSON document wins; nothing from a
failed attempt is kept. When every mirror fails, `AllServersFailed` is
raised and the caller decides how to degrade.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from schoolfinder.errors import AllServersFailed
from schoolfinder.ingestion.http import new_session, safe_response_text
from schoolfinder.log import LOGGER_NAME

# Public mirrors, most capable first.
DEFAULT_MIRRORS: tuple[str, ...] = (
    "https://overpass-api.de/api/interpreter",
    "https://overpass.openstreetmap.fr/api/interpreter",
    "https://overpass.kumi.systems/api/interpreter",
)


@dataclass
class OverpassClient:
    # Interpreter endpoints in the order they are tried.
    mirrors: list[str] = field(default_factory=lambda: list(DEFAULT_MIRRORS))
    # Client-side cap; must exceed the [timeout:...] budget declared in the query.
    request_timeout_s: int = 90
    # Shared with the geocoder so all OSM services see the same identifier.
    user_agent: str | None = None
    # Optional logger injection for tests.
    logger: logging.Logger | None = None
    # Optional session injection so tests can script mirror responses.
    session: requests.Session | None = None

    def __post_init__(self) -> None:
        # An empty mirror list would make every search fail without a single request.
        if len(self.mirrors) < 1:
            raise ValueError("at least one Overpass mirror is required")

    def _log(self) -> logging.Logger:
        return self.logger or logging.getLogger(LOGGER_NAME)

    def _http(self) -> requests.Session:
        # Created on first use; all mirrors share one session.
        if self.session is None:
            self.session = new_session(self.user_agent)
        return self.session

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "OverpassClient":
        cfg = settings.get("overpass", {}) or {}
        # Blank entries in YAML lists are dropped; an empty list falls back to the defaults.
        mirrors = [str(m).strip() for m in (cfg.get("mirrors") or DEFAULT_MIRRORS) if str(m).strip()]
        return cls(
            mirrors=mirrors,
            request_timeout_s=int(cfg.get("request_timeout_s", 90)),
            user_agent=(settings.get("geocoder", {}) or {}).get("user_agent"),
            logger=logging.getLogger(LOGGER_NAME),
        )

    def _try_mirror(self, url: str, query: str) -> list[dict[str, Any]] | None:
        # Returns the element list, or None when this mirror failed in any way.
        try:
            # The query goes as the raw POST body, which every public mirror accepts.
            resp = self._http().post(
                url,
                data=query.encode("utf-8"),
                headers={"Content-Type": "text/plain; charset=utf-8"},
                timeout=self.request_timeout_s,
            )
        except requests.RequestException as e:
            # Connection refused, DNS failure and client timeout all move on to the next mirror.
            self._log().warning("Overpass mirror failed: %s (%s)", url, e)
            return None

        # 429 (rate limit) and 504 (server busy) are the usual codes here.
        if resp.status_code >= 400:
            self._log().warning(
                "Overpass mirror failed: %s status=%s body=%s",
                url,
                resp.status_code,
                safe_response_text(resp, limit=200),
            )
            return None

        # Overloaded mirrors sometimes answer 200 with an HTML error page.
        try:
            payload = resp.json()
        except ValueError:
            self._log().warning("Overpass mirror returned non-JSON body: %s", url)
            return None

        # A well-formed answer is a mapping with an `elements` list (possibly empty).
        elements = payload.get("elements") if isinstance(payload, dict) else None
        if not isinstance(elements, list):
            self._log().warning("Overpass mirror returned no elements list: %s", url)
            return None
        if payload.get("remark"):
            # Runtime remarks (e.g. timeouts) can come with a truncated but valid result.
            self._log().warning("Overpass remark from %s: %s", url, payload["remark"])
        # Non-mapping entries cannot be turned into records.
        return [e for e in elements if isinstance(e, dict)]

    def execute(self, query: str) -> list[dict[str, Any]]:
        # One attempt per mirror, in configured order; no retries and no merging.
        for url in self.mirrors:
            elements = self._try_mirror(url, query)
            # An empty list is a valid answer and stops the loop.
            if elements is not None:
                self._log().info("Overpass mirror %s returned %s elements", url, len(elements))
                return elements
        # Every mirror failed; the caller decides how to degrade.
        raise AllServersFailed(self.mirrors)
