from __future__ import annotations

from collections.abc import Callable

import pyperclip

from member_intake.exceptions import ClipboardUnavailable

ResultCallback = Callable[[bool, str], None]

COPY_OK_MESSAGE = "Copied to clipboard"
COPY_FAILED_MESSAGE = "Unable to copy to clipboard"


def copy_to_clipboard(
    value: str,
    on_result: ResultCallback,
    *,
    copy: Callable[[str], None] | None = None,
) -> None:
    """
    Best-effort copy of value to the host clipboard.

    The outcome goes to on_result(success, message); failures are never raised.
    """
    writer = copy or pyperclip.copy
    try:
        writer(value)
    except Exception as e:  # noqa: BLE001 (reported through the callback)
        on_result(False, f"{COPY_FAILED_MESSAGE}: {str(e) or type(e).__name__}")
        return
    on_result(True, COPY_OK_MESSAGE)


def read_clipboard(*, paste: Callable[[], str] | None = None) -> str:
    reader = paste or pyperclip.paste
    try:
        return reader() or ""
    except pyperclip.PyperclipException as e:
        raise ClipboardUnavailable(f"Unable to read clipboard: {e}") from e
