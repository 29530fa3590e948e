"""
Offline tests for the geocoder, Overpass and fallback clients.

A fake session stands in for `requests.Session` and replays programmed
responses; nothing touches the network.
"""

from __future__ import annotations

# `json` builds realistic text bodies from programmed payloads.
import json

# `pytest` provides the runner, `raises` and the `monkeypatch` fixture.
import pytest
# `requests` provides the exception types the fakes emulate.
import requests

# Domain errors the clients translate HTTP failures into.
from schoolfinder.errors import AllServersFailed, NotFound, ServiceError
# The three clients under test.
from schoolfinder.ingestion.nominatim import NominatimGeoLocator
from schoolfinder.ingestion.overpass import OverpassClient
from schoolfinder.ingestion.places_fallback import PlacesFallbackClient
# Fallback records are always typed Unknown.
from schoolfinder.models import SchoolType


class _FakeResponse:
    # A minimal stand-in for `requests.Response` covering what the clients read.
    def __init__(self, *, status_code: int = 200, payload: object | None = None, text: str | None = None) -> None:
        # Drives both `raise_for_status` and the clients' own `>= 400` checks.
        self.status_code = int(status_code)
        # Returned by `json()`; None means "body is not JSON".
        self._payload = payload
        # Explicit text (e.g. an HTML error page) or the serialized payload.
        self._text = text if text is not None else json.dumps(payload, ensure_ascii=False)

    @property
    def text(self) -> str:
        # Read only when a client logs a truncated error body.
        return self._text

    def json(self) -> object:
        # Mirror `requests`: undecodable bodies raise a ValueError subclass.
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload

    def raise_for_status(self) -> None:
        # Same contract as `requests`: HTTPError for 4xx/5xx only.
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class _FakeSession:
    # Replays queued items in order; each is either a response or an exception to raise.
    def __init__(self, responses: list[object]) -> None:
        # Copy so the caller's list is not consumed.
        self._responses = list(responses)
        # Every call is recorded so tests can assert order, URLs and payloads.
        self.calls: list[dict[str, object]] = []

    def _next(self, method: str, url: str, **kwargs: object) -> _FakeResponse:
        # Record the call before raising so failed attempts are counted too.
        self.calls.append({"method": method, "url": url, **kwargs})
        # Tests queue exactly as many items as calls they expect.
        item = self._responses.pop(0)
        # Queued exceptions emulate connection errors and timeouts.
        if isinstance(item, Exception):
            raise item
        return item  # type: ignore[return-value]

    def get(self, url: str, **kwargs: object) -> _FakeResponse:
        # Used by the geocoder.
        return self._next("GET", url, **kwargs)

    def post(self, url: str, **kwargs: object) -> _FakeResponse:
        # Used by the Overpass mirrors and the Places fallback.
        return self._next("POST", url, **kwargs)


# --- geocoder -----------------------------------------------------------


def test_locate_uses_top_candidate_and_short_name() -> None:
    session = _FakeSession(
        [
            _FakeResponse(
                payload=[
                    {"lat": "59.9133", "lon": "10.7389", "name": "Oslo", "display_name": "Oslo, Norway"},
                    {"lat": "1.0", "lon": "1.0", "name": "Other"},
                ]
            )
        ]
    )
    locator = NominatimGeoLocator(session=session)  # type: ignore[arg-type]

    info = locator.locate("oslo")

    assert info.display_name == "Oslo"
    assert info.coordinate.lat == pytest.approx(59.9133)
    assert info.bbox.min_lon == pytest.approx(10.5889)
    assert session.calls[0]["params"]["q"] == "oslo"
    assert session.calls[0]["params"]["limit"] == 1


def test_locate_name_falls_back_to_display_name_then_input() -> None:
    session = _FakeSession(
        [
            _FakeResponse(payload=[{"lat": "60.39", "lon": "5.32", "display_name": "Bergen, Vestland, Norway"}]),
            _FakeResponse(payload=[{"lat": "60.39", "lon": "5.32"}]),
        ]
    )
    locator = NominatimGeoLocator(session=session)  # type: ignore[arg-type]
    assert locator.locate("bergen").display_name == "Bergen"
    assert locator.locate("bergen").display_name == "bergen"


def test_locate_empty_result_is_not_found() -> None:
    locator = NominatimGeoLocator(session=_FakeSession([_FakeResponse(payload=[])]))  # type: ignore[arg-type]
    with pytest.raises(NotFound):
        locator.locate("Atlantis")


def test_locate_http_and_transport_errors_are_service_errors() -> None:
    session = _FakeSession(
        [
            _FakeResponse(status_code=503, text="busy"),
            requests.ConnectionError("boom"),
            _FakeResponse(payload=[{"lat": "n/a", "lon": "5"}]),
        ]
    )
    locator = NominatimGeoLocator(session=session)  # type: ignore[arg-type]
    for _ in range(3):
        with pytest.raises(ServiceError):
            locator.locate("Oslo")


# --- overpass -----------------------------------------------------------


def test_execute_falls_through_mirrors_in_order() -> None:
    session = _FakeSession(
        [
            _FakeResponse(status_code=429, text="rate limited"),
            requests.Timeout("slow"),
            _FakeResponse(payload={"elements": [{"type": "node", "id": 1, "tags": {"amenity": "school"}}]}),
        ]
    )
    client = OverpassClient(mirrors=["https://a/api", "https://b/api", "https://c/api"], session=session)  # type: ignore[arg-type]

    elements = client.execute("[out:json];node(1);out;")

    assert elements == [{"type": "node", "id": 1, "tags": {"amenity": "school"}}]
    assert [c["url"] for c in session.calls] == ["https://a/api", "https://b/api", "https://c/api"]
    assert session.calls[0]["data"] == b"[out:json];node(1);out;"


def test_execute_stops_at_first_success() -> None:
    session = _FakeSession([_FakeResponse(payload={"elements": []})])
    client = OverpassClient(mirrors=["https://a/api", "https://b/api"], session=session)  # type: ignore[arg-type]
    assert client.execute("q") == []
    assert len(session.calls) == 1


def test_execute_malformed_body_counts_as_failure() -> None:
    session = _FakeSession(
        [
            _FakeResponse(payload=None, text="<html>error</html>"),
            _FakeResponse(payload={"no": "elements"}),
        ]
    )
    client = OverpassClient(mirrors=["https://a/api", "https://b/api"], session=session)  # type: ignore[arg-type]
    with pytest.raises(AllServersFailed) as excinfo:
        client.execute("q")
    assert excinfo.value.attempted == ["https://a/api", "https://b/api"]


# --- fallback -----------------------------------------------------------


def test_fallback_maps_listings_to_unknown_records() -> None:
    session = _FakeSession(
        [
            _FakeResponse(
                payload={
                    "places": [
                        {"displayName": {"text": "Majorstuen skole"}, "websiteUri": "https://m.example"},
                        {"displayName": {"text": "MAJORSTUEN SKOLE"}},
                        {"displayName": {"text": "Uranienborg skole"}},
                        {"websiteUri": "https://nameless.example"},
                    ]
                }
            )
        ]
    )
    client = PlacesFallbackClient(api_key="KEY", session=session)  # type: ignore[arg-type]

    records = client.search("Oslo")

    assert [r.name for r in records] == ["Majorstuen skole", "Uranienborg skole"]
    assert records[0].website == "https://m.example"
    assert all(r.type == SchoolType.UNKNOWN and r.contact == "" for r in records)
    call = session.calls[0]
    assert call["json"]["textQuery"] == "schools in Oslo"
    assert call["headers"]["X-Goog-Api-Key"] == "KEY"


@pytest.mark.parametrize(
    "item",
    [
        requests.ConnectionError("down"),
        _FakeResponse(status_code=403, text="forbidden"),
        _FakeResponse(payload=None, text="not json"),
        _FakeResponse(payload={"unexpected": True}),
    ],
)
def test_fallback_failures_degrade_to_empty(item: object) -> None:
    client = PlacesFallbackClient(api_key="KEY", session=_FakeSession([item]))  # type: ignore[arg-type]
    assert client.search("Oslo") == []


def test_fallback_without_key_makes_no_request() -> None:
    session = _FakeSession([])
    client = PlacesFallbackClient(api_key=None, session=session)  # type: ignore[arg-type]
    assert client.search("Oslo") == []
    assert session.calls == []


def test_fallback_reads_key_from_configured_env(monkeypatch) -> None:
    monkeypatch.setenv("MY_PLACES_KEY", "secret")
    client = PlacesFallbackClient.from_settings({"fallback": {"api_key_env": "MY_PLACES_KEY"}})
    assert client.api_key == "secret"
