from __future__ import annotations

import pytest

from member_intake.parsing.cleaning import clean_line, collapse_whitespace, split_lines


def test_split_lines_drops_blank_and_trims() -> None:
    text = "  John Smith \n\n   \r\nJane Doe\r\n\tPeter Pan\t\n"
    assert split_lines(text) == ["John Smith", "Jane Doe", "Peter Pan"]


def test_split_lines_empty_text() -> None:
    assert split_lines("") == []
    assert split_lines("\n \n\t\n") == []


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("12. John Smith", "John Smith"),
        ("1.Tlaki - +27 81 872 6246", "Tlaki - +27 81 872 6246"),
        ("- Jane Doe", "Jane Doe"),
        ("• Abigail", "Abigail"),
        ("* Ntalo", "Ntalo"),
        ("(3) Mary   Ann", "Mary Ann"),
        ("[4]\tPeter \t Pan", "Peter Pan"),
        ("John Smith 0821234567", "John Smith 0821234567"),
        ("082.123.4567 Jane Doe", "082.123.4567 Jane Doe"),
        ("3.14 Pi Road", "3.14 Pi Road"),
    ],
)
def test_clean_line_strips_list_markers(line: str, expected: str) -> None:
    assert clean_line(line) == expected


@pytest.mark.parametrize(
    "line",
    [
        "1. Tlaki - +27 81 872 6246",
        "1. 2. John",
        "- - Jane",
        "(1) [2] 3. Mary Jones",
        "   lots    of     space   ",
        "-",
        "John Smith",
        "",
    ],
)
def test_clean_line_is_idempotent(line: str) -> None:
    once = clean_line(line)
    assert clean_line(once) == once


def test_collapse_whitespace() -> None:
    assert collapse_whitespace("  a \t b\n c  ") == "a b c"
