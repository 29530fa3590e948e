from __future__ import annotations

from schoolfinder.models import BoundingBox, Coordinate

# Degrees added on each side of the geocoded point (roughly 15 km).
BBOX_MARGIN_DEG = 0.15


def bbox_around(coordinate: Coordinate, margin_deg: float = BBOX_MARGIN_DEG) -> BoundingBox:
    if margin_deg <= 0:
        raise ValueError("margin_deg must be > 0")
    return BoundingBox(
        min_lon=coordinate.lon - margin_deg,
        min_lat=coordinate.lat - margin_deg,
        max_lon=coordinate.lon + margin_deg,
        max_lat=coordinate.lat + margin_deg,
    )
