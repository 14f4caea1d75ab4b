from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from member_intake.parsing.cleaning import collapse_whitespace


@dataclass(frozen=True)
class PhoneRule:
    name: str
    pattern: re.Pattern[str]


@dataclass(frozen=True)
class PhoneMatch:
    rule: str
    raw: str
    normalized: str


@lru_cache(maxsize=None)
def phone_rules(country_code: str) -> tuple[PhoneRule, ...]:
    """Phone shapes in priority order; the first rule with any match wins."""
    cc = re.escape(country_code)
    return (
        PhoneRule("international_grouped", re.compile(rf"\+{cc}\s?\d{{2}}\s?\d{{3}}\s?\d{{4}}")),
        PhoneRule("international_compact", re.compile(rf"\+{cc}\s?\d{{9}}")),
        PhoneRule("country_plain", re.compile(rf"(?<!\d){cc}\d{{9}}(?!\d)")),
        PhoneRule("trunk_grouped", re.compile(r"(?<!\d)0\d{2}\s?\d{3}\s?\d{4}(?!\d)")),
        PhoneRule("bare_10", re.compile(r"(?<!\d)\d{10}(?!\d)")),
        PhoneRule("bare_9", re.compile(r"(?<!\d)\d{9}(?!\d)")),
        PhoneRule("parenthesized_area_code", re.compile(r"\(\d{3}\)\s?\d{3}[-\s]?\d{4}(?!\d)")),
        PhoneRule("grouped_digits", re.compile(r"(?<!\d)\d{3}[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)")),
    )


def normalize_phone(raw: str, *, country_code: str = "27") -> str:
    """
    Rewrite a matched phone into +<country code> form.

    Shapes that don't fit a known rule come back as the original text.
    """
    cleaned = re.sub(r"[^\d+]", "", raw)
    prefix = f"+{country_code}"

    if cleaned.startswith(prefix):
        return cleaned
    if cleaned.startswith(country_code) and len(cleaned) == len(country_code) + 9:
        return "+" + cleaned
    if cleaned.startswith("0") and len(cleaned) == 10:
        return prefix + cleaned[1:]
    if len(cleaned) == 9 and cleaned.isdigit():
        return prefix + cleaned
    return raw


def find_phone(text: str, *, country_code: str = "27") -> PhoneMatch | None:
    for rule in phone_rules(country_code):
        match = rule.pattern.search(text)
        if match:
            raw = match.group(0)
            return PhoneMatch(
                rule=rule.name,
                raw=raw,
                normalized=normalize_phone(raw, country_code=country_code),
            )
    return None


def extract_phone(text: str, *, country_code: str = "27") -> tuple[PhoneMatch | None, str]:
    """Return the chosen phone match and the text with that match removed."""
    found = find_phone(text, country_code=country_code)
    if found is None:
        return None, text
    remaining = collapse_whitespace(text.replace(found.raw, " ", 1))
    return found, remaining
