"""
Best-effort contact extraction for a school element.

Rules, first success wins:
(a) a contact-person tag holding a plain name (not a URL, email or phone number)
(b) a structured email tag
(c) an email address found in a description-like tag
(d) the first clause of a description-like tag that mentions a principal
    (a "." after an initial or a title such as "Dr" does not end a clause)
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from schoolfinder.query.keywords import (
    CONTACT_PERSON_KEYS,
    DESCRIPTION_KEYS,
    EMAIL_KEYS,
    PRINCIPAL_KEYWORDS,
)

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_RE = re.compile(r"^[+()\d\s./-]+$")

# Clause boundaries: ";", "!", "?", "|", newlines, or a "." followed by whitespace or end of text.
CLAUSE_BOUNDARY_RE = re.compile(r"[;!?|\n]+|\.+(?=\s|$)")

# A "." after these words (or after a single initial) does not end a clause.
ABBREVIATIONS: frozenset[str] = frozenset(
    {"dr", "mr", "mrs", "ms", "prof", "st", "sr", "jr", "mag", "dipl", "ing", "fr", "hr"}
)


def _clean(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def looks_like_url(value: str) -> bool:
    v = value.lower()
    return v.startswith(("http://", "https://", "www."))


def looks_like_email(value: str) -> bool:
    return "@" in value


def looks_like_phone(value: str) -> bool:
    if not PHONE_RE.match(value):
        return False
    return sum(ch.isdigit() for ch in value) >= 6


def split_clauses(text: str) -> list[str]:
    clauses: list[str] = []
    start = 0
    for match in CLAUSE_BOUNDARY_RE.finditer(text):
        if match.group(0).startswith("."):
            words = text[start : match.start()].split()
            last = words[-1].strip("()[]\"'").lower() if words else ""
            if (len(last) == 1 and last.isalpha()) or last in ABBREVIATIONS:
                continue
        clauses.append(text[start : match.start()])
        start = match.end()
    clauses.append(text[start:])
    return [c.strip() for c in clauses if c.strip()]


def _description_keys(tags: Mapping[str, Any]) -> list[str]:
    keys = [k for k in DESCRIPTION_KEYS if k in tags]
    extra = sorted(
        k for k in tags if k not in DESCRIPTION_KEYS and k.startswith(("description:", "note:"))
    )
    return keys + extra


def _person_from_tags(tags: Mapping[str, Any]) -> str:
    for key in CONTACT_PERSON_KEYS:
        value = _clean(tags.get(key))
        if not value:
            continue
        if looks_like_url(value) or looks_like_email(value) or looks_like_phone(value):
            continue
        return value
    return ""


def _email_from_tags(tags: Mapping[str, Any]) -> str:
    for key in EMAIL_KEYS:
        value = _clean(tags.get(key))
        if "@" in value and "." in value:
            return value
    return ""


def _email_from_text(tags: Mapping[str, Any]) -> str:
    for key in _description_keys(tags):
        match = EMAIL_RE.search(_clean(tags.get(key)))
        if match:
            return match.group(0)
    return ""


def _principal_sentence(tags: Mapping[str, Any]) -> str:
    for key in _description_keys(tags):
        for clause in split_clauses(_clean(tags.get(key))):
            lowered = clause.lower()
            if any(k in lowered for k in PRINCIPAL_KEYWORDS):
                return clause
    return ""


def extract_contact(tags: Mapping[str, Any] | None) -> str:
    if not tags:
        return ""
    for rule in (_person_from_tags, _email_from_tags, _email_from_text, _principal_sentence):
        found = rule(tags)
        if found:
            return found
    return ""
