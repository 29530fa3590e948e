from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SchoolType(str, Enum):
    PUBLIC = "Public"
    PRIVATE = "Private"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float


@dataclass(frozen=True)
class BoundingBox:
    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.min_lon, self.min_lat, self.max_lon, self.max_lat)

    def overpass_bbox(self) -> str:
        # Overpass QL wants (south, west, north, east).
        return f"{self.min_lat:.6f},{self.min_lon:.6f},{self.max_lat:.6f},{self.max_lon:.6f}"


@dataclass(frozen=True)
class CityInfo:
    coordinate: Coordinate
    bbox: BoundingBox
    display_name: str


@dataclass(frozen=True)
class SchoolRecord:
    name: str
    website: str
    type: SchoolType
    contact: str

    @property
    def dedup_key(self) -> str:
        return self.name.lower()

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "website": self.website,
            "type": self.type.value,
            "contact": self.contact,
        }
