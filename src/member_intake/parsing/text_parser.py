from __future__ import annotations

import re

from member_intake.parsing.cleaning import clean_line, collapse_whitespace, split_lines
from member_intake.parsing.contracts import BatchParseResult, ParsedRecord, ParseMode
from member_intake.parsing.names import extract_name
from member_intake.parsing.phones import extract_phone
from member_intake.parsing.scoring import calculate_confidence, collect_issues

_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

_RESIDUAL_EDGE_CHARS = " -,;:|"


def strip_email(text: str) -> str:
    match = _EMAIL_RE.search(text)
    if not match:
        return text
    return collapse_whitespace(text[: match.start()] + " " + text[match.end() :])


def residual_address(working: str, mode: ParseMode) -> str:
    if not mode.capture_address:
        return ""
    return working.strip(_RESIDUAL_EDGE_CHARS)


def parse_line(line: str, mode: ParseMode | None = None) -> ParsedRecord | None:
    """
    Extract one person from a single pasted line.

    Returns None when no name can be found; such lines are dropped from the
    batch without being treated as errors.
    """
    mode = mode or ParseMode()
    cleaned = clean_line(line)

    phone, working = extract_phone(cleaned, country_code=mode.country_code)
    phone_number = phone.normalized if phone else ""

    working = strip_email(working)

    name, working = extract_name(working, cleaned)
    first_name = name.first_name if name else ""
    last_name = name.last_name if name else ""

    address = residual_address(working, mode)

    confidence = calculate_confidence(
        first_name=first_name,
        last_name=last_name,
        phone_number=phone_number,
        address=address,
        mode=mode,
    )
    issues = collect_issues(
        first_name=first_name,
        last_name=last_name,
        phone_number=phone_number,
        confidence=confidence,
        mode=mode,
    )

    if not first_name and not last_name:
        return None

    return ParsedRecord(
        first_name=first_name,
        last_name=last_name,
        phone_number=phone_number,
        address=address,
        raw_text=line,
        confidence=confidence,
        issues=issues,
    )


def parse_lines(lines: list[str], mode: ParseMode) -> BatchParseResult:
    records: list[ParsedRecord] = []
    errors: list[str] = []

    for line_no, line in enumerate(lines, start=1):
        try:
            parsed = parse_line(line, mode)
        except Exception as e:  # noqa: BLE001 (reported per line)
            errors.append(f"Line {line_no}: {str(e) or type(e).__name__}")
            continue
        if parsed is not None:
            records.append(parsed)

    return BatchParseResult(records=records, total_lines=len(lines), errors=errors)


def parse_text(
    text: str,
    *,
    capture_address: bool = False,
    country_code: str = "27",
) -> BatchParseResult:
    """Parse pasted text, one person per line, into a batch of records."""
    mode = ParseMode(capture_address=capture_address, country_code=country_code)
    return parse_lines(split_lines(text), mode)
