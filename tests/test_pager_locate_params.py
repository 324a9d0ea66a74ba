"""Tests for fingerprint relocation and navigation parameter validation."""

import pytest

from tategaki.pager.pager_locate import fingerprint, locate
from tategaki.pager.pager_params import (
    clamp_page_index,
    font_size_from_param,
    page_index_from_param,
    page_param,
)


def test_fingerprint_takes_leading_sample():
    page = "x" * 80
    assert fingerprint(page) == "x" * 50
    assert fingerprint("short") == "short"


def test_locate_returns_first_containing_page():
    pages = ["<a>", "<b>start of text</b>", "start of text again"]
    assert locate("start of text", pages) == 1


def test_locate_not_found_and_empty_sample():
    assert locate("missing", ["a", "b"]) is None
    assert locate("", ["a", "b"]) is None
    assert locate("a", []) is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, 0),
        ("", 0),
        ("abc", 0),
        ("1", 0),
        ("4", 3),
        ("4abc", 3),
        (["2", "9"], 1),
        (7, 6),
        ("0", 0),
        ("-3", 0),
        ("1000", 9),
    ],
)
def test_page_index_from_param(value, expected):
    assert page_index_from_param(value, 10) == expected


def test_page_param_round_trip():
    assert page_param(0) == 1
    assert page_index_from_param(page_param(5), 10) == 5


def test_clamp_on_empty_layout():
    assert clamp_page_index(3, 0) == 0
    assert page_index_from_param("3", 0) == 0


def test_font_size_from_param():
    allowed = (12, 14, 16, 18)
    assert font_size_from_param("14", allowed, 18) == 14
    assert font_size_from_param(None, allowed, 18) == 18
    assert font_size_from_param("15", allowed, 18) == 18
    assert font_size_from_param("big", allowed, 18) == 18
