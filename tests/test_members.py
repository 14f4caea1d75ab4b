from __future__ import annotations

from datetime import date

from member_intake.members import PersistenceRecord, convert_to_persistence_record
from member_intake.parsing.contracts import ParsedRecord


def _parsed(first: str = "John", last: str = "Smith", address: str = "") -> ParsedRecord:
    return ParsedRecord(
        first_name=first,
        last_name=last,
        phone_number="+27821234567",
        address=address,
        raw_text=f"{first} {last}",
        confidence=1.0,
    )


def test_convert_copies_fields() -> None:
    record = convert_to_persistence_record(
        _parsed(address="123 Main Street"), "bacenta-7", "2024-03-01"
    )
    assert record == PersistenceRecord(
        first_name="John",
        last_name="Smith",
        phone_number="+27821234567",
        building_address="123 Main Street",
        group_id="bacenta-7",
        joined_date="2024-03-01",
        born_again_status=False,
    )


def test_missing_first_name_gets_placeholder() -> None:
    record = convert_to_persistence_record(_parsed(first="", last="Mokoena"), "g1", "2024-03-01")
    assert record.first_name == "Unknown"
    assert record.last_name == "Mokoena"


def test_join_date_defaults_to_today() -> None:
    record = convert_to_persistence_record(_parsed(), "g1")
    assert record.joined_date == date.today().isoformat()


def test_document_field_names() -> None:
    doc = convert_to_persistence_record(_parsed(), "g1", "2024-03-01").to_document()
    assert doc == {
        "firstName": "John",
        "lastName": "Smith",
        "phoneNumber": "+27821234567",
        "buildingAddress": "",
        "bornAgainStatus": False,
        "bacentaId": "g1",
        "joinedDate": "2024-03-01",
    }
