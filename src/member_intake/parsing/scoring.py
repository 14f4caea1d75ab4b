from __future__ import annotations

from typing import Literal

from member_intake.parsing.contracts import ParseMode

ConfidenceBand = Literal["good", "caution", "poor"]

NO_NAME = "No name detected"
MISSING_FIRST_NAME = "Missing first name"
MISSING_LAST_NAME = "Missing last name"
NO_PHONE = "No phone number detected"
PHONE_TOO_SHORT = "Phone number may be too short"
LOW_CONFIDENCE = "Low confidence in parsing accuracy"


def calculate_confidence(
    *,
    first_name: str,
    last_name: str,
    phone_number: str,
    address: str,
    mode: ParseMode,
) -> float:
    """
    Linear heuristic in [0, 1] used to rank records for review.

    Not a probability; weights depend on whether addresses are captured.
    """
    w = mode.weights
    has_name = bool(first_name or last_name)
    score = 0.0

    if first_name and last_name:
        score += w.both_names
    elif has_name:
        score += w.one_name

    if phone_number:
        if phone_number.startswith(mode.international_prefix) or len(phone_number) >= 9:
            score += w.good_phone
        else:
            score += w.weak_phone

    if mode.capture_address and len(address) > 5:
        score += w.address

    if has_name and phone_number:
        score += w.name_and_phone_bonus

    return max(0.0, min(1.0, round(score, 3)))


def collect_issues(
    *,
    first_name: str,
    last_name: str,
    phone_number: str,
    confidence: float,
    mode: ParseMode,
) -> list[str]:
    issues: list[str] = []

    if not first_name and not last_name:
        issues.append(NO_NAME)
    elif not first_name:
        issues.append(MISSING_FIRST_NAME)
    elif not last_name:
        issues.append(MISSING_LAST_NAME)

    if not phone_number:
        issues.append(NO_PHONE)
    elif len(phone_number) < 9:
        issues.append(PHONE_TOO_SHORT)

    if confidence < mode.weights.low_confidence_threshold:
        issues.append(LOW_CONFIDENCE)

    return issues


def confidence_band(confidence: float) -> ConfidenceBand:
    if confidence >= 0.8:
        return "good"
    if confidence >= 0.6:
        return "caution"
    return "poor"
