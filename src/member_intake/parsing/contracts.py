from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ScoringWeights:
    both_names: float
    one_name: float
    good_phone: float
    weak_phone: float
    address: float
    name_and_phone_bonus: float
    low_confidence_threshold: float


# Bulk add without address capture leans on name + phone.
BULK_WEIGHTS = ScoringWeights(
    both_names=0.6,
    one_name=0.3,
    good_phone=0.4,
    weak_phone=0.2,
    address=0.1,
    name_and_phone_bonus=0.1,
    low_confidence_threshold=0.4,
)

ADDRESS_WEIGHTS = ScoringWeights(
    both_names=0.4,
    one_name=0.2,
    good_phone=0.3,
    weak_phone=0.1,
    address=0.2,
    name_and_phone_bonus=0.1,
    low_confidence_threshold=0.5,
)


@dataclass(frozen=True)
class ParseMode:
    capture_address: bool = False
    country_code: str = "27"

    def __post_init__(self) -> None:
        if not self.country_code.isdigit():
            raise ValueError(f"country_code must be digits only, got {self.country_code!r}")

    @property
    def weights(self) -> ScoringWeights:
        return ADDRESS_WEIGHTS if self.capture_address else BULK_WEIGHTS

    @property
    def international_prefix(self) -> str:
        return f"+{self.country_code}"


@dataclass(frozen=True)
class ParsedRecord:
    first_name: str
    last_name: str
    phone_number: str
    address: str
    raw_text: str
    confidence: float
    issues: list[str] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict[str, Any]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phoneNumber": self.phone_number,
            "address": self.address,
            "rawText": self.raw_text,
            "confidence": self.confidence,
            "issues": list(self.issues),
        }


@dataclass(frozen=True)
class BatchParseResult:
    records: list[ParsedRecord]
    total_lines: int
    errors: list[str] = field(default_factory=list)

    @property
    def successfully_parsed(self) -> int:
        return len(self.records)

    def to_dict(self) -> dict[str, Any]:
        return {
            "records": [record.to_dict() for record in self.records],
            "totalLines": self.total_lines,
            "successfullyParsed": self.successfully_parsed,
            "errors": list(self.errors),
        }
