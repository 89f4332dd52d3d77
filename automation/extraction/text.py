"""
Text helpers for extraction (whitespace collapse, match-all text, number parsing).
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from bs4 import Tag

_LEADING_INT = re.compile(r"^\s*(\d+)")
_DIGITS = re.compile(r"\d[\d,.]*")


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace to one space and trim."""
    return re.sub(r"\s+", " ", text).strip()


def text_of(root: Tag, selector: str) -> str:
    """Concatenated text of every match of `selector` under `root`, trimmed."""
    return "".join(el.get_text() for el in root.select(selector)).strip()


def first_text(root: Tag, selectors: Iterable[str]) -> str:
    """Trimmed text of the first selector (in order) that yields non-empty text."""
    for selector in selectors:
        el = root.select_one(selector)
        if el is None:
            continue
        value = el.get_text().strip()
        if value:
            return value
    return ""


def attr_of(root: Tag, selector: str, attr: str) -> Optional[str]:
    el = root.select_one(selector)
    if el is None:
        return None
    value = el.get(attr)
    if isinstance(value, list):
        value = " ".join(value)
    return value or None


def parse_quantity(text: str) -> int:
    """Leading integer of `text`; anything unparsable (or zero) counts as 1."""
    match = _LEADING_INT.match(text or "")
    if not match:
        return 1
    value = int(match.group(1))
    return value if value > 0 else 1


def parse_count(text: str) -> Optional[int]:
    """First number in text with thousands separators removed ("1,234 ratings" -> 1234)."""
    match = _DIGITS.search(text or "")
    if not match:
        return None
    digits = re.sub(r"[,.]", "", match.group(0))
    return int(digits) if digits else None


def parse_rating(text: str, pattern: re.Pattern) -> Optional[float]:
    match = pattern.search(text or "")
    if not match:
        return None
    return float(match.group(1).replace(",", "."))
