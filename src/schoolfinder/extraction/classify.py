"""
Public / Private / Unknown classification from OSM-style tags.

Rules are evaluated top to bottom and the first match wins:
1. a classification tag whose value is a known public value -> Public
2. a classification tag whose value is a known private value -> Private
3. name, operator or ownership containing a private hint -> Private
4. name, operator or ownership containing a public hint -> Public
5. `isced:level` covering level 0 or 1 -> Public
6. otherwise Unknown
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from schoolfinder.models import SchoolType
from schoolfinder.query.keywords import (
    CLASSIFICATION_TAG_KEYS,
    PRIVATE_NAME_HINTS,
    PRIVATE_TAG_VALUES,
    PUBLIC_NAME_HINTS,
    PUBLIC_TAG_VALUES,
)

_ISCED_SPLIT = re.compile(r"[;,]")


def _tag(tags: Mapping[str, Any], key: str) -> str:
    value = tags.get(key)
    return str(value).strip().lower() if value is not None else ""


def _tag_values(tags: Mapping[str, Any]) -> list[str]:
    values: list[str] = []
    for key in CLASSIFICATION_TAG_KEYS:
        # OSM uses ";" for multi-valued tags.
        values.extend(v.strip() for v in _tag(tags, key).split(";") if v.strip())
    return values


def _contains_any(haystacks: list[str], needles: tuple[str, ...]) -> bool:
    return any(n in h for h in haystacks if h for n in needles)


def _isced_levels(raw: str) -> set[int]:
    levels: set[int] = set()
    for part in _ISCED_SPLIT.split(raw):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            lo, _, hi = part.partition("-")
            if lo.strip().isdigit() and hi.strip().isdigit():
                levels.update(range(int(lo), int(hi) + 1))
            continue
        if part.isdigit():
            levels.add(int(part))
    return levels


def detect_type(tags: Mapping[str, Any] | None) -> SchoolType:
    if not tags:
        return SchoolType.UNKNOWN

    structured = _tag_values(tags)
    if any(v in PUBLIC_TAG_VALUES for v in structured):
        return SchoolType.PUBLIC
    if any(v in PRIVATE_TAG_VALUES for v in structured):
        return SchoolType.PRIVATE

    texts = [_tag(tags, "name"), _tag(tags, "operator"), _tag(tags, "ownership")]
    if _contains_any(texts, PRIVATE_NAME_HINTS):
        return SchoolType.PRIVATE
    if _contains_any(texts, PUBLIC_NAME_HINTS):
        return SchoolType.PUBLIC

    levels = _isced_levels(_tag(tags, "isced:level"))
    if levels & {0, 1}:
        return SchoolType.PUBLIC

    return SchoolType.UNKNOWN
