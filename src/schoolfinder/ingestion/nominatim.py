"""
City geocoding through a Nominatim-compatible search endpoint.

Only the top-ranked candidate is used; the search area is a fixed margin
around its point (see `schoolfinder.spatial.bbox`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from schoolfinder.errors import NotFound, ServiceError
from schoolfinder.ingestion.http import new_session, safe_response_text
from schoolfinder.log import LOGGER_NAME
from schoolfinder.models import CityInfo, Coordinate
from schoolfinder.spatial.bbox import bbox_around


def _short_name(place: dict[str, Any], fallback: str) -> str:
    # `name` is the bare place name; `display_name` is the full "City, County, Country" chain.
    name = str(place.get("name") or "").strip()
    if name:
        return name
    display = str(place.get("display_name") or "").strip()
    if display:
        return display.split(",")[0].strip() or fallback
    return fallback


@dataclass
class NominatimGeoLocator:
    # Search endpoint; any Nominatim-compatible server works.
    url: str = "https://nominatim.openstreetmap.org/search"
    # Nominatim's usage policy requires an identifying User-Agent.
    user_agent: str = "schoolfinder/0.1"
    # Per-request timeout in seconds.
    request_timeout_s: int = 20
    # Optional Accept-Language so display names come back in one language.
    language: str | None = None
    # Optional logger injection for tests.
    logger: logging.Logger | None = None
    # Optional session injection so tests can replace the network.
    session: requests.Session | None = None

    def _log(self) -> logging.Logger:
        return self.logger or logging.getLogger(LOGGER_NAME)

    def _http(self) -> requests.Session:
        # Created on first use and reused for every later lookup.
        if self.session is None:
            self.session = new_session(self.user_agent)
        return self.session

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "NominatimGeoLocator":
        # The `geocoder` section may be absent; class defaults fill the gaps.
        cfg = settings.get("geocoder", {}) or {}
        return cls(
            url=str(cfg.get("url", cls.url)),
            user_agent=str(cfg.get("user_agent", cls.user_agent)),
            request_timeout_s=int(cfg.get("request_timeout_s", cls.request_timeout_s)),
            language=cfg.get("language"),
            logger=logging.getLogger(LOGGER_NAME),
        )

    def locate(self, city: str) -> CityInfo:
        # Only the top-ranked candidate is needed.
        params: dict[str, Any] = {"format": "jsonv2", "q": city, "limit": 1}
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        if self.language:
            headers["Accept-Language"] = self.language

        self._log().info("Geocoding city=%r", city)
        # Connection errors and timeouts surface as a service error, not NotFound.
        try:
            resp = self._http().get(self.url, params=params, headers=headers, timeout=self.request_timeout_s)
        except requests.RequestException as e:
            raise ServiceError(f"Geocoding request failed: {e}") from e

        # Non-2xx responses are logged with a truncated body before raising.
        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            self._log().warning(
                "Geocoder returned status=%s body=%s", resp.status_code, safe_response_text(resp)
            )
            raise ServiceError(f"Geocoding service error (status {resp.status_code})") from e

        # A 200 with a non-JSON body (proxy pages, maintenance notices) is a service error too.
        try:
            data = resp.json()
        except ValueError as e:
            raise ServiceError("Geocoding service returned invalid JSON") from e

        # An empty candidate list is the only case reported as "city not found".
        if not isinstance(data, list) or not data:
            raise NotFound(city)
        place = data[0]
        if not isinstance(place, dict):
            raise ServiceError("Unexpected geocoding response shape")

        # Nominatim returns lat/lon as strings.
        try:
            coordinate = Coordinate(lat=float(place["lat"]), lon=float(place["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ServiceError("Geocoding result has no usable coordinates") from e

        # The search area is a fixed margin around the point, not the place's own bbox.
        info = CityInfo(
            coordinate=coordinate,
            bbox=bbox_around(coordinate),
            display_name=_short_name(place, city),
        )
        self._log().info(
            "Geocoded city=%r -> %s (%.5f, %.5f)",
            city,
            info.display_name,
            coordinate.lat,
            coordinate.lon,
        )
        return info
