"""
Delimited-text export of a school list.

Every field is quoted; embedded double quotes are doubled (RFC 4180), which
leaves plain values byte-identical to naive `"value"` quoting.
"""

from __future__ import annotations

import csv
import re
from typing import Iterable

import pandas as pd

from schoolfinder.models import SchoolRecord

HEADER: tuple[str, ...] = ("School Name", "Website", "Type", "Principal")

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9]")


def to_delimited_text(records: Iterable[SchoolRecord]) -> str:
    rows = [(r.name, r.website, r.type.value, r.contact) for r in records]
    df = pd.DataFrame(rows, columns=list(HEADER), dtype=str)
    text = df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    # Rows are joined with "\n" and the text carries no trailing newline.
    return text[:-1] if text.endswith("\n") else text


def export_filename(city: str) -> str:
    return f"{_UNSAFE_FILENAME_CHARS.sub('_', city)}_schools.csv"
