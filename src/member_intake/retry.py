"""Retry helper for member store writes.

Exponential backoff with jitter for rate limits (429) and transient
server errors (5xx). Anything else is raised straight away.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from member_intake.exceptions import APIRetryExhausted


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 5
    base_delay_s: float = 0.5
    max_delay_s: float = 8.0
    jitter_s: float = 0.2


def is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or 500 <= status_code <= 599


def compute_backoff_s(attempt: int, cfg: RetryConfig) -> float:
    """Delay before the next attempt (attempt is 1-indexed)."""
    delay = min(cfg.base_delay_s * (2 ** (attempt - 1)), cfg.max_delay_s)
    return delay + random.uniform(0, cfg.jitter_s)


def _extract_status_code(exc: Exception) -> int | None:
    """
    Supports:
    - exc.status_code
    - exc.resp.status (googleapiclient HttpError)
    - exc.status
    """
    if hasattr(exc, "status_code"):
        return exc.status_code  # type: ignore[no-any-return]
    if hasattr(exc, "resp") and hasattr(exc.resp, "status"):
        return exc.resp.status  # type: ignore[no-any-return]
    if hasattr(exc, "status"):
        return exc.status  # type: ignore[no-any-return]
    return None


def with_retries[T](
    callable_fn: Callable[[], T],
    *,
    operation: str,
    logger: Any,
    cfg: RetryConfig,
    context: dict[str, Any] | None = None,
) -> T:
    """Run callable_fn, retrying transient failures.

    Args:
        callable_fn: Zero-argument function performing the write
        operation: Operation name for log events
        logger: Anything with ``info(event, **fields)`` (JsonlLogger)
        cfg: Retry configuration
        context: Extra fields for the ``store_retry`` log event

    Raises:
        APIRetryExhausted: When every attempt failed with a retryable status
    """
    context = context or {}
    last_error: Exception | None = None
    last_status: int | None = None

    for attempt in range(1, cfg.max_attempts + 1):
        try:
            return callable_fn()
        except Exception as exc:
            last_error = exc
            status_code = _extract_status_code(exc)
            last_status = status_code

            if status_code is None or not is_retryable_status(status_code):
                raise

            if attempt >= cfg.max_attempts:
                break

            sleep_s = compute_backoff_s(attempt, cfg)
            logger.info(
                "store_retry",
                operation=operation,
                attempt=attempt,
                max_attempts=cfg.max_attempts,
                sleep_s=round(sleep_s, 3),
                status_code=status_code,
                **context,
            )
            time.sleep(sleep_s)

    raise APIRetryExhausted(
        operation=operation,
        attempts=cfg.max_attempts,
        status_code=last_status,
        message=f"Failed after {cfg.max_attempts} attempts",
        cause=last_error,
    )
