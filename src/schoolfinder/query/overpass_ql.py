"""
Overpass QL construction for the school search.

The query unions two strategies over the bounding box:
- category tags (`amenity=school`, `building=school`, any `education`, any `school`),
- a case-insensitive name match against the multilingual keyword table.

Each filter is applied to nodes, ways and relations, and the output asks for
one center point per result plus its tags.
"""

from __future__ import annotations

from typing import Iterable

from schoolfinder.models import BoundingBox
from schoolfinder.query.keywords import PRIMARY_KEYWORDS

GEOMETRY_KINDS: tuple[str, ...] = ("node", "way", "relation")

# Tag filters in Overpass QL selector syntax.
CATEGORY_FILTERS: tuple[str, ...] = (
    '["amenity"="school"]',
    '["building"="school"]',
    '["education"]',
    '["school"]',
)

DEFAULT_QUERY_TIMEOUT_S = 60

_REGEX_META = set(".^$*+?()[]{}|\\\"")


def name_regex(keywords: Iterable[str]) -> str:
    terms = [k for k in keywords if k]
    if not terms:
        raise ValueError("keyword list must not be empty")
    for term in terms:
        bad = _REGEX_META.intersection(term)
        if bad:
            raise ValueError(f"keyword {term!r} contains reserved characters: {sorted(bad)}")
    return "|".join(terms)


def build_overpass_query(
    bbox: BoundingBox,
    *,
    keywords: Iterable[str] = PRIMARY_KEYWORDS,
    timeout_s: int = DEFAULT_QUERY_TIMEOUT_S,
) -> str:
    area = bbox.overpass_bbox()
    pattern = name_regex(keywords)

    statements: list[str] = []
    for tag_filter in CATEGORY_FILTERS:
        for kind in GEOMETRY_KINDS:
            statements.append(f"  {kind}{tag_filter}({area});")
    for kind in GEOMETRY_KINDS:
        statements.append(f'  {kind}["name"~"{pattern}",i]({area});')

    lines = [f"[out:json][timeout:{int(timeout_s)}];", "("]
    lines.extend(statements)
    lines.append(");")
    lines.append("out center tags qt;")
    return "\n".join(lines) + "\n"
