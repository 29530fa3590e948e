"""
Fallback school search through the Google Places Text Search API.

Used only when the Overpass path produced no schools. Listings carry no
ownership or contact signal, so every record is typed Unknown with an empty
contact. Any failure here degrades to an empty list.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import requests

from schoolfinder.extraction.dedupe import dedupe
from schoolfinder.ingestion.http import new_session, safe_response_text
from schoolfinder.log import LOGGER_NAME
from schoolfinder.models import SchoolRecord, SchoolType

# Only the two fields a record can use are requested.
FIELD_MASK = "places.displayName,places.websiteUri"


def _listing_to_record(place: Any) -> SchoolRecord | None:
    # None marks a listing that cannot become a record; `dedupe` drops it.
    if not isinstance(place, dict):
        return None
    display = place.get("displayName")
    # v1 returns {"text": ..., "languageCode": ...}; tolerate a bare string too.
    name = display.get("text") if isinstance(display, dict) else display
    name = str(name or "").strip()
    if not name:
        return None
    return SchoolRecord(
        name=name,
        website=str(place.get("websiteUri") or "").strip(),
        type=SchoolType.UNKNOWN,
        contact="",
    )


@dataclass
class PlacesFallbackClient:
    # Read from the environment variable named in settings; None disables the client.
    api_key: str | None
    # Places API (New) text search endpoint.
    url: str = "https://places.googleapis.com/v1/places:searchText"
    # Per-request timeout in seconds.
    request_timeout_s: int = 15
    # Sent as `pageSize`; the API caps a single page at 20.
    max_results: int = 20
    # Lets a profile switch the fallback off without removing the key.
    enabled: bool = True
    # Optional logger injection for tests.
    logger: logging.Logger | None = None
    # Optional session injection so tests can replace the network.
    session: requests.Session | None = None

    def _log(self) -> logging.Logger:
        return self.logger or logging.getLogger(LOGGER_NAME)

    def _http(self) -> requests.Session:
        # Created on first use; a search without a key never opens one.
        if self.session is None:
            self.session = new_session()
        return self.session

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "PlacesFallbackClient":
        cfg = settings.get("fallback", {}) or {}
        # The key itself never lives in YAML, only the name of the variable holding it.
        key_env = str(cfg.get("api_key_env", "GOOGLE_PLACES_API_KEY"))
        return cls(
            api_key=os.getenv(key_env) or None,
            url=str(cfg.get("url", cls.url)),
            request_timeout_s=int(cfg.get("request_timeout_s", 15)),
            max_results=int(cfg.get("max_results", 20)),
            enabled=bool(cfg.get("enabled", True)),
            logger=logging.getLogger(LOGGER_NAME),
        )

    def search(self, city: str) -> list[SchoolRecord]:
        # Every path below returns a list; this method never raises for service trouble.
        if not self.enabled:
            self._log().info("Fallback search disabled; skipping city=%r", city)
            return []
        if not self.api_key:
            self._log().warning("Fallback search skipped: no API key configured")
            return []

        payload = {"textQuery": f"schools in {city}", "pageSize": int(self.max_results)}
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.api_key,
            # Without a field mask the v1 API rejects the request.
            "X-Goog-FieldMask": FIELD_MASK,
        }
        self._log().info("Running fallback search for city=%r", city)
        # Network errors degrade to "no fallback results".
        try:
            resp = self._http().post(self.url, json=payload, headers=headers, timeout=self.request_timeout_s)
        except requests.RequestException as e:
            self._log().warning("Fallback search failed: %s", e)
            return []

        # Bad keys (403) and quota errors (429) are logged with the error body.
        if resp.status_code >= 400:
            self._log().warning(
                "Fallback search failed: status=%s body=%s", resp.status_code, safe_response_text(resp)
            )
            return []

        try:
            data = resp.json()
        except ValueError:
            self._log().warning("Fallback search returned invalid JSON")
            return []

        # No matches come back as `{}` rather than an empty `places` list.
        places = data.get("places") if isinstance(data, dict) else None
        if not isinstance(places, list):
            return []
        # Same first-seen, case-insensitive name dedup as the Overpass path.
        records = dedupe(_listing_to_record(p) for p in places)
        self._log().info("Fallback search returned %s schools for city=%r", len(records), city)
        return records
