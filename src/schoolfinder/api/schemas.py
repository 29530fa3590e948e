from __future__ import annotations

from pydantic import BaseModel, Field


class School(BaseModel):
    name: str
    website: str = ""
    type: str
    contact: str = ""


class CityOut(BaseModel):
    query: str
    display_name: str
    lat: float
    lon: float
    bbox: list[float] = Field(min_length=4, max_length=4)


class SearchResponse(BaseModel):
    city: CityOut
    source: str
    count: int = Field(ge=0)
    schools: list[School] = Field(default_factory=list)


class SchoolList(BaseModel):
    city: str
    type: str
    q: str = ""
    count: int = Field(ge=0)
    schools: list[School] = Field(default_factory=list)
