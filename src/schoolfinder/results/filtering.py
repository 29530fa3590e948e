from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from schoolfinder.models import SchoolRecord, SchoolType

ALL_TYPES = "All"

TYPE_SELECTORS: tuple[str, ...] = (ALL_TYPES,) + tuple(t.value for t in SchoolType)


@dataclass(frozen=True)
class FilterCriteria:
    type_selector: str = ALL_TYPES
    name_substring: str = ""

    def __post_init__(self) -> None:
        # Normalize "public" / "PUBLIC" to the canonical selector spelling.
        wanted = str(self.type_selector or ALL_TYPES).strip().lower()
        for selector in TYPE_SELECTORS:
            if selector.lower() == wanted:
                object.__setattr__(self, "type_selector", selector)
                break
        else:
            raise ValueError(f"type_selector must be one of {list(TYPE_SELECTORS)}, got {self.type_selector!r}")
        object.__setattr__(self, "name_substring", str(self.name_substring or ""))

    def matches(self, record: SchoolRecord) -> bool:
        if self.type_selector != ALL_TYPES and record.type.value != self.type_selector:
            return False
        return self.name_substring.lower() in record.name.lower()


def apply_filters(records: Iterable[SchoolRecord], criteria: FilterCriteria) -> list[SchoolRecord]:
    return [r for r in records if criteria.matches(r)]
