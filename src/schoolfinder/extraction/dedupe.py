from __future__ import annotations

from typing import Iterable

from schoolfinder.models import SchoolRecord


def dedupe(records: Iterable[SchoolRecord | None]) -> list[SchoolRecord]:
    """
    Drop rejected entries (None) and keep the first record per lower-cased name.

    Later duplicates are discarded as-is, even when they carry more data.
    """
    seen: set[str] = set()
    out: list[SchoolRecord] = []
    for record in records:
        if record is None:
            continue
        key = record.dedup_key
        if key in seen:
            continue
        seen.add(key)
        out.append(record)
    return out
