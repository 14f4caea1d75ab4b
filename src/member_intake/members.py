from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from member_intake.parsing.contracts import ParsedRecord

UNKNOWN_FIRST_NAME = "Unknown"


@dataclass(frozen=True)
class PersistenceRecord:
    first_name: str
    last_name: str
    phone_number: str
    building_address: str
    group_id: str
    joined_date: str  # YYYY-MM-DD
    born_again_status: bool = False

    def to_document(self) -> dict[str, Any]:
        """Field names used by the member document store."""
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phoneNumber": self.phone_number,
            "buildingAddress": self.building_address,
            "bornAgainStatus": self.born_again_status,
            "bacentaId": self.group_id,
            "joinedDate": self.joined_date,
        }


def convert_to_persistence_record(
    record: ParsedRecord,
    group_id: str,
    join_date: str | None = None,
) -> PersistenceRecord:
    return PersistenceRecord(
        first_name=record.first_name or UNKNOWN_FIRST_NAME,
        last_name=record.last_name,
        phone_number=record.phone_number,
        building_address=record.address,
        group_id=group_id,
        joined_date=join_date or date.today().isoformat(),
        born_again_status=False,
    )
