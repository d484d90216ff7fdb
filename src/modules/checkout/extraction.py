"""School / grade extraction from cart line items.

Items are scanned in order; on each item the strategies below are tried
in turn and the first match wins:

1. explicit ``school`` / ``grade`` attributes on the item;
2. nested ``customer_info`` (or ``supplies[*]``) values;
3. the item ``name``: grade tokens (``K``, ``K-5``, ``3rd``, ``3rd Grade``,
   ``Grade 4``, ``Grado 2``) and, for names made of ``" - "`` segments, the first
   segment that is neither a pack label nor a grade;
4. nothing found: empty strings.

Each field is resolved independently, so the school may come from one
item and the grade from another.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, NamedTuple, Optional

SEGMENT_SEPARATOR = " - "

_GRADE_TOKEN = (
    r"(?:Kindergarten|K-\d+|K|\d+(?:st|nd|rd|th)(?:\s+Grade)?|Grade\s+\d+|Grado\s+\d+)"
)
GRADE_SEGMENT_RE = re.compile(rf"^{_GRADE_TOKEN}$", re.IGNORECASE)
GRADE_SEARCH_RES = (
    re.compile(r"\bK-\d+\b", re.IGNORECASE),
    re.compile(r"\bK\b", re.IGNORECASE),
    re.compile(r"\bKindergarten\b", re.IGNORECASE),
    re.compile(r"\b\d+(?:st|nd|rd|th)(?:\s+Grade)?\b", re.IGNORECASE),
    re.compile(r"\bGrade\s+\d+\b", re.IGNORECASE),
    re.compile(r"\bGrado\s+\d+\b", re.IGNORECASE),
)
PACK_SEGMENT_RE = re.compile(r"^pack$", re.IGNORECASE)


class SchoolGrade(NamedTuple):
    school: str
    grade: str


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _explicit(item: Any, key: str) -> Optional[str]:
    value = _field(item, key)
    if not value:
        return None
    return str(value).strip() or None


def _nested(item: Any, key: str) -> Optional[str]:
    info = _field(item, "customer_info") or {}
    if isinstance(info, Mapping) and info.get(key):
        return str(info[key]).strip() or None
    for supply in _field(item, "supplies") or []:
        if isinstance(supply, Mapping) and supply.get(key):
            return str(supply[key]).strip() or None
    return None


def _segments(name: str) -> list[str]:
    if SEGMENT_SEPARATOR not in name:
        return []
    return [part.strip() for part in name.split(SEGMENT_SEPARATOR) if part.strip()]


def is_grade_like(text: str) -> bool:
    return bool(GRADE_SEGMENT_RE.match(text.strip()))


def grade_from_name(name: str) -> Optional[str]:
    for segment in _segments(name):
        if is_grade_like(segment):
            return segment
    for pattern in GRADE_SEARCH_RES:
        match = pattern.search(name)
        if match:
            return match.group(0)
    return None


def school_from_name(name: str) -> Optional[str]:
    for segment in _segments(name):
        if PACK_SEGMENT_RE.match(segment) or is_grade_like(segment):
            continue
        return segment
    return None


def extract_school_and_grade(items: Iterable[Any]) -> SchoolGrade:
    """Resolve the school and grade a purchase is for.

    ``items`` may be cart line item models or plain dicts.
    """
    items = list(items)
    school = _first(items, "school", school_from_name)
    grade = _first(items, "grade", grade_from_name)
    return SchoolGrade(school=school or "", grade=grade or "")


def _first(items: list[Any], key: str, from_name) -> Optional[str]:
    for item in items:
        value = (
            _explicit(item, key)
            or _nested(item, key)
            or from_name(str(_field(item, "name") or ""))
        )
        if value:
            return value
    return None
