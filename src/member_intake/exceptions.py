"""Typed exceptions for member intake."""

from __future__ import annotations

from typing import Any


class ClipboardUnavailable(RuntimeError):
    """Raised when the host clipboard cannot be read."""


class APIRetryExhausted(RuntimeError):
    """Raised when a member store write keeps failing with transient errors.

    Rate limits (429) and server errors (5xx) are retried; this is raised once
    the retry budget is used up.
    """

    def __init__(
        self,
        operation: str,
        attempts: int,
        status_code: int | None = None,
        message: str | None = None,
        cause: Exception | None = None,
    ):
        """Initialize APIRetryExhausted exception.

        Args:
            operation: Store operation that failed (e.g. ``sheets.append``)
            attempts: Number of attempts made
            status_code: HTTP status code of the last failure, if known
            message: Optional custom error message
            cause: Last exception raised by the operation
        """
        self.operation = operation
        self.attempts = attempts
        self.status_code = status_code
        self.message = message or "Store retry attempts exhausted"
        self.cause = cause
        super().__init__(str(self))

    def __str__(self) -> str:
        parts = [f"APIRetryExhausted: {self.message}"]
        parts.append(f"operation={self.operation}")
        parts.append(f"attempts={self.attempts}")
        if self.status_code is not None:
            parts.append(f"status_code={self.status_code}")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSONL log events."""
        result: dict[str, Any] = {
            "error_type": "APIRetryExhausted",
            "operation": self.operation,
            "attempts": self.attempts,
            "message": self.message,
        }
        if self.status_code is not None:
            result["status_code"] = self.status_code
        if self.cause is not None:
            result["cause"] = str(self.cause)
            result["cause_type"] = type(self.cause).__name__
        return result
