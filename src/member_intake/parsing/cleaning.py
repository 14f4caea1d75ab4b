from __future__ import annotations

import re

_LIST_MARKER_RE = re.compile(
    r"^(?:"
    r"\d+\.(?!\d)\s*"  # "12. " but not "082.123.4567"
    r"|[-–—•·*]\s*"  # bullets and dashes
    r"|\(\d+\)\s*"  # "(3)"
    r"|\[\d+\]\s*"  # "[3]"
    r")"
)

_WHITESPACE_RE = re.compile(r"\s+")


def split_lines(text: str) -> list[str]:
    """Split pasted text into trimmed, non-blank candidate lines."""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = [line.strip() for line in normalized.split("\n")]
    return [line for line in lines if line]


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def clean_line(line: str) -> str:
    """
    Strip list markers ("1.", "-", "(2)", "[3]", bullets) and collapse whitespace.

    Markers are removed until none is left at the start, so cleaning an
    already-cleaned line returns it unchanged.
    """
    cleaned = collapse_whitespace(line)
    while True:
        match = _LIST_MARKER_RE.match(cleaned)
        if not match or not match.group(0):
            break
        cleaned = cleaned[match.end() :].strip()
    return cleaned
