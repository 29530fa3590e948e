"""
End-to-end school search: city text -> geocode -> Overpass -> records.

A search produces an immutable `SearchSession`; filtering and export operate
on that snapshot. `SearchCoordinator` tracks which search is the newest so a
slower, older search can never overwrite the result of a newer one.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol

from schoolfinder.errors import AllServersFailed, EmptyInput, NoResults, SearchSuperseded
from schoolfinder.extraction.dedupe import dedupe
from schoolfinder.extraction.records import extract_record
from schoolfinder.ingestion.nominatim import NominatimGeoLocator
from schoolfinder.ingestion.overpass import OverpassClient
from schoolfinder.ingestion.places_fallback import PlacesFallbackClient
from schoolfinder.log import LOGGER_NAME
from schoolfinder.models import CityInfo, SchoolRecord
from schoolfinder.query.overpass_ql import DEFAULT_QUERY_TIMEOUT_S, build_overpass_query
from schoolfinder.results.export import export_filename, to_delimited_text
from schoolfinder.results.filtering import FilterCriteria, apply_filters


class GeoLocator(Protocol):
    def locate(self, city: str) -> CityInfo: ...


class SpatialQueryExecutor(Protocol):
    def execute(self, query: str) -> list[dict[str, Any]]: ...


class FallbackSearch(Protocol):
    def search(self, city: str) -> list[SchoolRecord]: ...


def _log() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


@dataclass(frozen=True)
class SearchSession:
    city: str
    city_info: CityInfo
    schools: tuple[SchoolRecord, ...]
    source: str

    @property
    def count(self) -> int:
        return len(self.schools)

    @property
    def export_filename(self) -> str:
        return export_filename(self.city)

    def filtered(self, criteria: FilterCriteria | None = None) -> list[SchoolRecord]:
        return apply_filters(self.schools, criteria or FilterCriteria())

    def to_csv(self, criteria: FilterCriteria | None = None) -> str:
        return to_delimited_text(self.filtered(criteria))


@dataclass(frozen=True)
class SearchToken:
    generation: int
    city: str
    coordinator: "SearchCoordinator" = field(repr=False, compare=False)

    @property
    def is_current(self) -> bool:
        return self.coordinator.generation == self.generation

    def check(self) -> None:
        if not self.is_current:
            raise SearchSuperseded(self.city)


class SearchCoordinator:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._generation = 0
        self._current: SearchSession | None = None

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def current(self) -> SearchSession | None:
        with self._lock:
            return self._current

    def start(self, city: str) -> SearchToken:
        with self._lock:
            self._generation += 1
            # A new search replaces the previous result set wholesale.
            self._current = None
            return SearchToken(generation=self._generation, city=city, coordinator=self)

    def commit(self, token: SearchToken, session: SearchSession) -> bool:
        with self._lock:
            if token.generation != self._generation:
                return False
            self._current = session
            return True


def records_from_elements(elements: Iterable[dict[str, Any]]) -> list[SchoolRecord]:
    return dedupe(extract_record(e) for e in elements)


def search_schools(
    city: str,
    *,
    geolocator: GeoLocator,
    overpass: SpatialQueryExecutor,
    fallback: FallbackSearch,
    token: SearchToken | None = None,
    query_timeout_s: int = DEFAULT_QUERY_TIMEOUT_S,
) -> SearchSession:
    city = (city or "").strip()
    if not city:
        raise EmptyInput()

    def checkpoint() -> None:
        if token is not None:
            token.check()

    city_info = geolocator.locate(city)
    checkpoint()

    query = build_overpass_query(city_info.bbox, timeout_s=query_timeout_s)
    try:
        elements = overpass.execute(query)
    except AllServersFailed as e:
        _log().warning("All %s Overpass mirrors failed; falling back to local search", len(e.attempted))
        elements = []
    checkpoint()

    schools = records_from_elements(elements)
    source = "overpass"
    if not schools:
        _log().info("No schools from Overpass for city=%r; invoking fallback search", city)
        schools = fallback.search(city)
        source = "fallback"
        checkpoint()

    if not schools:
        raise NoResults(city)

    _log().info("Found %s schools for city=%r (source=%s)", len(schools), city, source)
    return SearchSession(city=city, city_info=city_info, schools=tuple(schools), source=source)


@dataclass
class SchoolFinder:
    geolocator: GeoLocator
    overpass: SpatialQueryExecutor
    fallback: FallbackSearch
    query_timeout_s: int = DEFAULT_QUERY_TIMEOUT_S
    coordinator: SearchCoordinator = field(default_factory=SearchCoordinator)

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "SchoolFinder":
        return cls(
            geolocator=NominatimGeoLocator.from_settings(settings),
            overpass=OverpassClient.from_settings(settings),
            fallback=PlacesFallbackClient.from_settings(settings),
            query_timeout_s=int((settings.get("overpass", {}) or {}).get("query_timeout_s", DEFAULT_QUERY_TIMEOUT_S)),
        )

    @property
    def current(self) -> SearchSession | None:
        return self.coordinator.current

    def search(self, city: str) -> SearchSession:
        city = (city or "").strip()
        # Blank input must leave the current results and any in-flight search untouched.
        if not city:
            raise EmptyInput()
        token = self.coordinator.start(city)
        try:
            session = search_schools(
                city,
                geolocator=self.geolocator,
                overpass=self.overpass,
                fallback=self.fallback,
                token=token,
                query_timeout_s=self.query_timeout_s,
            )
        except SearchSuperseded:
            _log().info("Search for city=%r superseded by a newer search", city)
            raise
        if not self.coordinator.commit(token, session):
            _log().info("Search for city=%r finished after a newer search started; discarded", city)
            raise SearchSuperseded(city)
        return session
