"""
Turn one raw Overpass element into a `SchoolRecord`, or reject it.

The server-side query over-matches (e.g. any `education=*`, any name with
"primary"), so the inclusion test is re-applied here and names of secondary
or tertiary institutions are dropped.
"""

from __future__ import annotations

from typing import Any, Mapping

from schoolfinder.extraction.classify import detect_type
from schoolfinder.extraction.contact import extract_contact
from schoolfinder.models import SchoolRecord
from schoolfinder.query.keywords import HIGHER_EDUCATION_KEYWORDS, PRIMARY_KEYWORDS, WEBSITE_KEYS

UNNAMED_SCHOOL = "Unnamed School"

_NAME_KEYS = ("name", "name:en", "official_name")


def _text(tags: Mapping[str, Any], key: str) -> str:
    value = tags.get(key)
    return str(value).strip() if value is not None else ""


def display_name(tags: Mapping[str, Any]) -> str:
    for key in _NAME_KEYS:
        name = _text(tags, key)
        if name:
            return name
    return UNNAMED_SCHOOL


def website(tags: Mapping[str, Any]) -> str:
    for key in WEBSITE_KEYS:
        value = _text(tags, key)
        if value:
            return value
    return ""


def has_school_category(tags: Mapping[str, Any]) -> bool:
    if _text(tags, "amenity").lower() == "school":
        return True
    if _text(tags, "building").lower() == "school":
        return True
    return bool(_text(tags, "education")) or bool(_text(tags, "school"))


def matches_primary_keyword(name: str) -> bool:
    lowered = name.lower()
    return any(k in lowered for k in PRIMARY_KEYWORDS)


def is_higher_education(name: str) -> bool:
    lowered = name.lower()
    return any(k in lowered for k in HIGHER_EDUCATION_KEYWORDS)


def is_primary_school(tags: Mapping[str, Any]) -> bool:
    name = display_name(tags)
    if not (has_school_category(tags) or matches_primary_keyword(name)):
        return False
    return not is_higher_education(name)


def extract_record(element: Mapping[str, Any]) -> SchoolRecord | None:
    tags = element.get("tags") if isinstance(element, Mapping) else None
    if not isinstance(tags, Mapping) or not tags:
        return None
    if not is_primary_school(tags):
        return None
    return SchoolRecord(
        name=display_name(tags),
        website=website(tags),
        type=detect_type(tags),
        contact=extract_contact(tags),
    )
