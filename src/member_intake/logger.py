from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


def _iso_utc(ts: float | None = None) -> str:
    t = time.gmtime(ts if ts is not None else time.time())
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", t)


@dataclass
class JsonlLogger:
    """One JSON object per line: ts, level, component, event + fields."""

    path: Path
    component: str
    min_level: str = "DEBUG"

    def __post_init__(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if self.min_level.upper() not in _LEVELS:
            raise ValueError(f"unknown log level: {self.min_level}")

    def enabled(self, level: str) -> bool:
        return _LEVELS.get(level.upper(), 0) >= _LEVELS[self.min_level.upper()]

    def log(self, level: str, event: str, **fields: Any) -> None:
        if not self.enabled(level):
            return
        record: dict[str, Any] = {
            "ts": _iso_utc(),
            "level": level.upper(),
            "component": self.component,
            "event": event,
            **fields,
        }
        line = json.dumps(record, ensure_ascii=False, default=str)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")

    def child(self, component: str) -> JsonlLogger:
        return JsonlLogger(path=self.path, component=component, min_level=self.min_level)

    def debug(self, event: str, **fields: Any) -> None:
        self.log("DEBUG", event, **fields)

    def info(self, event: str, **fields: Any) -> None:
        self.log("INFO", event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self.log("WARNING", event, **fields)

    def error(self, event: str, **fields: Any) -> None:
        self.log("ERROR", event, **fields)
