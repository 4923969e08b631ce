"""Tests for pair, number and year parsing shared by every dialect."""

import pytest

from tagbridge.features.tags.usecases._tag_utils import (
    first_text,
    format_pair,
    parse_pair,
    parse_uint,
    parse_year,
)


@pytest.mark.parametrize(
    ("number", "total", "expected"),
    [(3, 0, "3"), (3, 12, "3/12"), (0, 0, ""), (0, 12, "0/12")],
)
def test_format_pair(number: int, total: int, expected: str) -> None:
    assert format_pair(number, total) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("3/12", (3, 12)),
        ("7", (7, 0)),
        ("abc", (0, 0)),
        ("", (0, 0)),
        (" 4 / 9 ", (4, 9)),
        ("3/12/99", (3, 12)),
        ("x/12", (0, 12)),
    ],
)
def test_parse_pair(text: str, expected: tuple[int, int]) -> None:
    assert parse_pair(text) == expected


def test_parse_uint_clamps_negative_and_garbage() -> None:
    assert parse_uint("-3") == 0
    assert parse_uint("nope") == 0
    assert parse_uint(None) == 0
    assert parse_uint(True) == 0
    assert parse_uint(" 42 ") == 42


def test_parse_year_takes_leading_digits() -> None:
    assert parse_year("1999-04-01") == 1999
    assert parse_year("2004") == 2004
    assert parse_year("") == 0
    assert parse_year("unknown") == 0


def test_first_text_walks_keys_in_order() -> None:
    tags = {"ALBUM ARTIST": ["  "], "ALBUM_ARTIST": ["Band"], "ALBUMARTIST": []}
    assert first_text(tags, ("ALBUMARTIST", "ALBUM ARTIST", "ALBUM_ARTIST")) == "Band"
    assert first_text(tags, ("MISSING",)) == ""
