from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from member_intake.parsing.cleaning import collapse_whitespace

_NAME_WORD = r"[A-Z][A-Za-z'\-]*"

TWO_GROUP_RE = re.compile(
    rf"^({_NAME_WORD}(?:\s+{_NAME_WORD})*)\s+({_NAME_WORD}(?:\s+{_NAME_WORD})*)$"
)

_NAME_TOKEN_RE = re.compile(r"^[A-Z][A-Za-z'\-]*$")

# " - 081 234 5678" (or just a dangling " -") left behind after phone removal
_TRAILING_PHONE_FRAGMENT_RE = re.compile(r"\s*-[\d+()\s\-]*$")

_FIELD_SEPARATOR_RE = re.compile(r"[,;:|]")
_PRE_SEPARATOR_RE = re.compile(r"[-,;:|]")


@dataclass(frozen=True)
class NameMatch:
    first_name: str
    last_name: str
    full_match: str
    tier: str


def looks_like_name(word: str) -> bool:
    return len(word) >= 2 and bool(_NAME_TOKEN_RE.match(word))


def name_source(working: str) -> str:
    """Portion of the working line that may hold the name."""
    candidate = _TRAILING_PHONE_FRAGMENT_RE.sub("", working)
    candidate = _FIELD_SEPARATOR_RE.split(candidate, maxsplit=1)[0]
    return collapse_whitespace(candidate)


def match_two_groups(text: str) -> NameMatch | None:
    match = TWO_GROUP_RE.match(text)
    if not match:
        return None
    return NameMatch(
        first_name=match.group(1).strip(),
        last_name=match.group(2).strip(),
        full_match=match.group(0),
        tier="two_group",
    )


def match_first_two_tokens(text: str) -> NameMatch | None:
    words = text.split()
    if len(words) < 2:
        return None
    first, second = words[0], words[1]
    if looks_like_name(first) and looks_like_name(second):
        return NameMatch(first, second, f"{first} {second}", tier="first_two_tokens")
    return None


def match_single_token(text: str) -> NameMatch | None:
    # A lone capitalized place name is accepted too; that's known behaviour.
    words = text.split()
    if len(words) == 1 and looks_like_name(words[0]):
        return NameMatch(words[0], "", words[0], tier="single_token")
    return None


NameRule = Callable[[str], NameMatch | None]

TOKEN_RULES: tuple[NameRule, ...] = (match_first_two_tokens, match_single_token)
NAME_RULES: tuple[NameRule, ...] = (match_two_groups, *TOKEN_RULES)


def match_pre_separator(cleaned_line: str) -> NameMatch | None:
    before = collapse_whitespace(_PRE_SEPARATOR_RE.split(cleaned_line, maxsplit=1)[0])
    for rule in TOKEN_RULES:
        found = rule(before)
        if found:
            return NameMatch(
                found.first_name, found.last_name, found.full_match, tier="pre_separator"
            )
    return None


def find_name(working: str, cleaned_line: str) -> NameMatch | None:
    """Run the name tiers in order against the phone/email-stripped line."""
    source = name_source(working)
    for rule in NAME_RULES:
        found = rule(source)
        if found:
            return found
    return match_pre_separator(cleaned_line)


def extract_name(working: str, cleaned_line: str) -> tuple[NameMatch | None, str]:
    """Return the name match and the working line with the matched text removed."""
    found = find_name(working, cleaned_line)
    if found is None:
        return None, working
    remaining = collapse_whitespace(working.replace(found.full_match, " ", 1))
    return found, remaining
