from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from fastapi import FastAPI, HTTPException, Query, Response

from schoolfinder.api.schemas import CityOut, School, SchoolList, SearchResponse
from schoolfinder.errors import (
    EmptyInput,
    NoResults,
    NotFound,
    SchoolFinderError,
    SearchSuperseded,
    ServiceError,
)
from schoolfinder.models import SchoolRecord
from schoolfinder.pipeline import SchoolFinder, SearchSession
from schoolfinder.results.filtering import FilterCriteria
from schoolfinder.settings import load_settings

CONFIG_PATH = Path(os.getenv("SCHOOLFINDER_CONFIG", "config/default.yaml")).resolve()
PROFILE = os.getenv("SCHOOLFINDER_PROFILE") or None

app = FastAPI(title="School Finder API", version="0.1.0")


@lru_cache(maxsize=1)
def get_finder() -> SchoolFinder:
    return SchoolFinder.from_settings(load_settings(CONFIG_PATH, profile=PROFILE))


def _status_for(err: SchoolFinderError) -> int:
    if isinstance(err, EmptyInput):
        return 400
    if isinstance(err, (NotFound, NoResults)):
        return 404
    if isinstance(err, SearchSuperseded):
        return 409
    if isinstance(err, ServiceError):
        return 502
    return 500


def _school(record: SchoolRecord) -> School:
    return School(**record.to_dict())


def _criteria(type_selector: str, q: str) -> FilterCriteria:
    try:
        return FilterCriteria(type_selector=type_selector, name_substring=q)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def _current_session() -> SearchSession:
    session = get_finder().current
    if session is None:
        raise HTTPException(status_code=404, detail="No search results yet; call /search first")
    return session


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/search", response_model=SearchResponse)
def search(city: str = Query("", description="City name")) -> SearchResponse:
    try:
        session = get_finder().search(city)
    except SchoolFinderError as e:
        raise HTTPException(status_code=_status_for(e), detail=str(e)) from e
    info = session.city_info
    return SearchResponse(
        city=CityOut(
            query=session.city,
            display_name=info.display_name,
            lat=info.coordinate.lat,
            lon=info.coordinate.lon,
            bbox=list(info.bbox.as_tuple()),
        ),
        source=session.source,
        count=session.count,
        schools=[_school(s) for s in session.schools],
    )


@app.get("/schools", response_model=SchoolList)
def schools(
    type_selector: str = Query("All", alias="type"),
    q: str = Query(""),
) -> SchoolList:
    criteria = _criteria(type_selector, q)
    session = _current_session()
    filtered = session.filtered(criteria)
    return SchoolList(
        city=session.city,
        type=criteria.type_selector,
        q=criteria.name_substring,
        count=len(filtered),
        schools=[_school(s) for s in filtered],
    )


@app.get("/export")
def export(
    type_selector: str = Query("All", alias="type"),
    q: str = Query(""),
) -> Response:
    criteria = _criteria(type_selector, q)
    session = _current_session()
    return Response(
        content=session.to_csv(criteria),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{session.export_filename}"'},
    )
