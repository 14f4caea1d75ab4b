from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Protocol
from uuid import uuid4

from member_intake.logger import JsonlLogger
from member_intake.members import PersistenceRecord
from member_intake.retry import RetryConfig, with_retries
from member_intake.run_context import iso_utc_now

SHEET_COLUMNS = [
    "id",
    "firstName",
    "lastName",
    "phoneNumber",
    "buildingAddress",
    "bornAgainStatus",
    "bacentaId",
    "joinedDate",
    "createdDate",
    "lastUpdated",
]


@dataclass(frozen=True)
class StoredMember:
    id: str
    record: PersistenceRecord
    created_date: str
    last_updated: str

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            **self.record.to_document(),
            "createdDate": self.created_date,
            "lastUpdated": self.last_updated,
        }


@dataclass(frozen=True)
class FailedMember:
    record: PersistenceRecord
    error: str


@dataclass(frozen=True)
class BulkAddResult:
    successful: list[StoredMember] = field(default_factory=list)
    failed: list[FailedMember] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def failure_messages(self) -> list[str]:
        messages: list[str] = []
        for f in self.failed:
            name = f"{f.record.first_name} {f.record.last_name}".strip()
            messages.append(f"Failed to add {name}: {f.error}")
        return messages


class MemberStore(Protocol):
    def create(self, record: PersistenceRecord) -> StoredMember: ...


def _stamp(record: PersistenceRecord) -> StoredMember:
    now = iso_utc_now()
    return StoredMember(id=uuid4().hex, record=record, created_date=now, last_updated=now)


class InMemoryMemberStore:
    """Dict-backed store for dry runs and tests."""

    def __init__(self) -> None:
        self.members: dict[str, StoredMember] = {}

    def create(self, record: PersistenceRecord) -> StoredMember:
        stored = _stamp(record)
        self.members[stored.id] = stored
        return stored


class SheetsMemberStore:
    """Appends one row per member to a Google Sheets tab."""

    def __init__(
        self,
        service: Any,
        spreadsheet_id: str,
        *,
        logger: JsonlLogger,
        tab: str = "Members",
        retry: RetryConfig | None = None,
    ) -> None:
        self._service = service
        self._spreadsheet_id = spreadsheet_id
        self._tab = tab
        self._logger = logger
        self._retry = retry or RetryConfig()

    @staticmethod
    def to_row(stored: StoredMember) -> list[Any]:
        doc = stored.to_document()
        return [doc[col] for col in SHEET_COLUMNS]

    def create(self, record: PersistenceRecord) -> StoredMember:
        stored = _stamp(record)
        row = self.to_row(stored)

        def append() -> Any:
            return (
                self._service.spreadsheets()
                .values()
                .append(
                    spreadsheetId=self._spreadsheet_id,
                    range=f"{self._tab}!A1",
                    valueInputOption="RAW",
                    insertDataOption="INSERT_ROWS",
                    body={"values": [row]},
                )
                .execute()
            )

        with_retries(
            append,
            operation="sheets.append",
            logger=self._logger,
            cfg=self._retry,
            context={"member_id": stored.id, "tab": self._tab},
        )
        return stored


def add_members(
    store: MemberStore,
    records: Iterable[PersistenceRecord],
    *,
    log: JsonlLogger | None = None,
) -> BulkAddResult:
    """Create every record, collecting per-item successes and failures."""
    successful: list[StoredMember] = []
    failed: list[FailedMember] = []

    for idx, record in enumerate(records, start=1):
        try:
            stored = store.create(record)
        except Exception as e:  # noqa: BLE001 (failures are returned per member)
            err_msg = str(e) or type(e).__name__
            failed.append(FailedMember(record=record, error=err_msg))
            if log:
                log.error(
                    "member_add_failed",
                    idx=idx,
                    error_type=type(e).__name__,
                    error_message=err_msg,
                )
            continue

        successful.append(stored)
        if log:
            log.info("member_added", idx=idx, member_id=stored.id, group_id=record.group_id)

    if log:
        log.info("bulk_add_end", added=len(successful), failed=len(failed))
    return BulkAddResult(successful=successful, failed=failed)
