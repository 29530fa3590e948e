from __future__ import annotations

import pytest

from schoolfinder.extraction.classify import detect_type
from schoolfinder.models import SchoolType


def test_structured_public_tag_outranks_private_name_hint() -> None:
    tags = {"operator": "public", "name": "Sunrise Montessori"}
    assert detect_type(tags) == SchoolType.PUBLIC


def test_structured_private_tag() -> None:
    assert detect_type({"operator:type": "private", "name": "Hill Primary"}) == SchoolType.PRIVATE
    assert detect_type({"ownership": "charter"}) == SchoolType.PRIVATE


def test_multi_valued_tags_are_split() -> None:
    assert detect_type({"operator:type": "religious;community"}) == SchoolType.PUBLIC


def test_private_hint_beats_public_hint() -> None:
    # "international" (private) and "primary" (public) both appear in the name.
    assert detect_type({"name": "Oslo International Primary"}) == SchoolType.PRIVATE


def test_public_hint_in_operator() -> None:
    assert detect_type({"name": "Majorstuen", "operator": "Oslo kommune"}) == SchoolType.PUBLIC


@pytest.mark.parametrize("level", ["1", "0;1", "1-3", "0,2"])
def test_isced_lowest_levels_are_public(level: str) -> None:
    assert detect_type({"name": "Majorstuen skole", "isced:level": level}) == SchoolType.PUBLIC


def test_isced_higher_level_stays_unknown() -> None:
    assert detect_type({"name": "Majorstuen skole", "isced:level": "2"}) == SchoolType.UNKNOWN


def test_no_signal_is_unknown() -> None:
    assert detect_type({"amenity": "school", "name": "Majorstuen skole"}) == SchoolType.UNKNOWN
    assert detect_type({}) == SchoolType.UNKNOWN
    assert detect_type(None) == SchoolType.UNKNOWN
