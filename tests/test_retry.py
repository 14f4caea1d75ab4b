"""Tests for store write retries and APIRetryExhausted."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import pytest

from member_intake.exceptions import APIRetryExhausted
from member_intake.retry import RetryConfig, compute_backoff_s, is_retryable_status, with_retries

FAST = RetryConfig(max_attempts=3, base_delay_s=0.1, max_delay_s=1.0, jitter_s=0.0)


class FakeHttpError(Exception):
    """HttpError-like exception carrying resp.status."""

    def __init__(self, status_code: int):
        self.resp = Mock()
        self.resp.status = status_code
        super().__init__(f"HttpError {status_code}")


class FlakyCall:
    """Fails fail_count times with status_code, then succeeds."""

    def __init__(self, fail_count: int, status_code: int):
        self.fail_count = fail_count
        self.status_code = status_code
        self.call_count = 0

    def __call__(self) -> dict[str, Any]:
        self.call_count += 1
        if self.call_count <= self.fail_count:
            raise FakeHttpError(self.status_code)
        return {"success": True}


class RecordingLogger:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def info(self, event: str, **fields: Any) -> None:
        self.events.append((event, fields))


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    calls: list[float] = []
    monkeypatch.setattr("time.sleep", calls.append)
    return calls


@pytest.mark.parametrize("status_code", [429, 500, 503])
def test_transient_errors_are_retried(status_code: int, sleeps: list[float]) -> None:
    call = FlakyCall(fail_count=2, status_code=status_code)
    logger = RecordingLogger()

    result = with_retries(
        call, operation="sheets.append", logger=logger, cfg=FAST, context={"tab": "Members"}
    )

    assert result == {"success": True}
    assert call.call_count == 3
    assert len(sleeps) == 2

    events = [e for e, _ in logger.events]
    assert events == ["store_retry", "store_retry"]
    first = logger.events[0][1]
    assert first["operation"] == "sheets.append"
    assert first["attempt"] == 1
    assert first["max_attempts"] == 3
    assert first["status_code"] == status_code
    assert first["tab"] == "Members"


def test_no_retry_on_400(sleeps: list[float]) -> None:
    call = FlakyCall(fail_count=999, status_code=400)

    with pytest.raises(FakeHttpError):
        with_retries(call, operation="sheets.append", logger=RecordingLogger(), cfg=FAST)

    assert call.call_count == 1
    assert sleeps == []


def test_errors_without_status_propagate(sleeps: list[float]) -> None:
    def broken() -> None:
        raise KeyError("missing")

    with pytest.raises(KeyError):
        with_retries(broken, operation="sheets.append", logger=RecordingLogger(), cfg=FAST)
    assert sleeps == []


def test_retry_exhausted(sleeps: list[float]) -> None:
    call = FlakyCall(fail_count=999, status_code=503)

    with pytest.raises(APIRetryExhausted) as exc_info:
        with_retries(call, operation="sheets.append", logger=RecordingLogger(), cfg=FAST)

    exc = exc_info.value
    assert exc.operation == "sheets.append"
    assert exc.attempts == 3
    assert exc.status_code == 503
    assert isinstance(exc.cause, FakeHttpError)
    assert "sheets.append" in str(exc)
    assert exc.to_dict()["cause_type"] == "FakeHttpError"

    assert call.call_count == 3
    assert len(sleeps) == 2


def test_backoff_is_capped() -> None:
    assert compute_backoff_s(1, FAST) == pytest.approx(0.1)
    assert compute_backoff_s(2, FAST) == pytest.approx(0.2)
    assert compute_backoff_s(10, FAST) == pytest.approx(1.0)


@pytest.mark.parametrize(
    ("status_code", "expected"),
    [(429, True), (500, True), (599, True), (400, False), (403, False), (404, False)],
)
def test_retryable_statuses(status_code: int, expected: bool) -> None:
    assert is_retryable_status(status_code) is expected
