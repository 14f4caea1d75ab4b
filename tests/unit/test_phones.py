from __future__ import annotations

import pytest

from member_intake.parsing.phones import extract_phone, find_phone, normalize_phone, phone_rules


def test_phone_rules_are_cached_and_ordered() -> None:
    rules = phone_rules("27")
    assert rules is phone_rules("27")
    assert isinstance(rules, tuple)
    assert [r.name for r in rules] == [
        "international_grouped",
        "international_compact",
        "country_plain",
        "trunk_grouped",
        "bare_10",
        "bare_9",
        "parenthesized_area_code",
        "grouped_digits",
    ]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("+27 81 872 6246", "+27818726246"),
        ("+27823456789", "+27823456789"),
        ("27821234567", "+27821234567"),
        ("0821234567", "+27821234567"),
        ("082 123 4567", "+27821234567"),
        ("(082) 123-4567", "+27821234567"),
        ("821234567", "+27821234567"),
        # unknown shapes pass through untouched
        ("555-123-4567", "555-123-4567"),
        ("12345", "12345"),
    ],
)
def test_normalize_phone(raw: str, expected: str) -> None:
    assert normalize_phone(raw) == expected


def test_normalize_phone_other_country_code() -> None:
    assert normalize_phone("0712345678", country_code="44") == "+44712345678"
    assert normalize_phone("44712345678", country_code="44") == "+44712345678"


def test_find_phone_international_grouped() -> None:
    found = find_phone("Tlaki - +27 81 872 6246")
    assert found is not None
    assert found.rule == "international_grouped"
    assert found.raw == "+27 81 872 6246"
    assert found.normalized == "+27818726246"


def test_find_phone_uses_rule_priority_not_position() -> None:
    found = find_phone("Call 0821234567 or +27823456789")
    assert found is not None
    assert found.rule == "international_grouped"
    assert found.normalized == "+27823456789"


def test_find_phone_parenthesized_area_code() -> None:
    found = find_phone("Sam (082) 123-4567")
    assert found is not None
    assert found.rule == "parenthesized_area_code"
    assert found.normalized == "+27821234567"


def test_find_phone_none() -> None:
    assert find_phone("John Smith 12 Main Road") is None


def test_find_phone_custom_country_code() -> None:
    found = find_phone("Ann +44 71 234 5678", country_code="44")
    assert found is not None
    assert found.normalized == "+44712345678"


def test_extract_phone_removes_matched_text() -> None:
    found, remaining = extract_phone("John 0821234567 Smith")
    assert found is not None
    assert found.raw == "0821234567"
    assert remaining == "John Smith"


def test_extract_phone_without_match_returns_text() -> None:
    found, remaining = extract_phone("John Smith")
    assert found is None
    assert remaining == "John Smith"


def test_find_phone_country_code_without_plus() -> None:
    found = find_phone("Jane Doe 27821234567")
    assert found is not None
    assert found.rule == "country_plain"
    assert found.raw == "27821234567"
    assert found.normalized == "+27821234567"


def test_digit_runs_are_not_cut_mid_number() -> None:
    # 11 digits that don't start with the country code match no bare rule
    assert find_phone("Ref 08212345678") is None
    found = find_phone("Sam 12 0821234567")
    assert found is not None
    assert found.raw == "0821234567"


def test_find_phone_dotted_groups() -> None:
    found = find_phone("Jane 082.123.4567")
    assert found is not None
    assert found.rule == "grouped_digits"
    assert found.normalized == "+27821234567"
