"""Tag value helpers.

Where: src/tagbridge/features/tags/usecases/_tag_utils.py
What: Pure parsing and formatting routines shared by every tag dialect.
Why: One definition of "number", "pair" and "year" across ID3, MP4 and Vorbis.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

__all__ = [
    "first_text",
    "format_pair",
    "parse_pair",
    "parse_uint",
    "parse_year",
]


def parse_uint(value: object) -> int:
    """Parse a non-negative integer; negatives and garbage become 0."""

    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value if value > 0 else 0
    if value is None:
        return 0
    text = str(value).strip()
    try:
        number = int(text)
    except ValueError:
        return 0
    return number if number > 0 else 0


def parse_pair(value: object) -> tuple[int, int]:
    """Split ``"N/M"`` on the first slash.

    ``"7"`` -> ``(7, 0)``; ``"3/12"`` -> ``(3, 12)``; ``"3/12/99"`` -> ``(3, 12)``;
    anything unparsable yields zeros for the affected half.
    """

    if value is None:
        return 0, 0
    text = str(value).strip()
    if not text:
        return 0, 0
    head, sep, tail = text.partition("/")
    if not sep:
        return parse_uint(head), 0
    total_text = tail.split("/", 1)[0]
    return parse_uint(head), parse_uint(total_text)


def format_pair(number: int, total: int) -> str:
    """Encode ``(N, M)`` as ``"N/M"``, ``"N"`` when the total is unknown, or ``""``."""

    if number <= 0 and total <= 0:
        return ""
    if total <= 0:
        return str(number)
    return f"{max(number, 0)}/{total}"


def parse_year(value: object) -> int:
    """Return the leading four-digit year of a date string, or 0."""

    if value is None:
        return 0
    text = str(value).strip()
    if len(text) >= 4 and text[:4].isdigit():
        return int(text[:4])
    return parse_uint(text)


def first_text(tags: Mapping[str, Any] | Any, keys: Iterable[str]) -> str:
    """Return the first non-empty string found under any of ``keys``, in order."""

    for key in keys:
        try:
            raw = tags.get(key)
        except (KeyError, ValueError):
            continue
        if raw is None:
            continue
        values: Sequence[Any] = raw if isinstance(raw, list) else [raw]
        for item in values:
            text = str(item).strip()
            if text:
                return text
    return ""
