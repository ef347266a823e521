# /multitarget/adapters/system/logging_cfg.py
from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any


def resolve_level(level: int | str) -> int:
    """Map a level name such as settings.LOG_LEVEL ("info", "DEBUG") to its number."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelNamesMapping().get(level.upper())
    if resolved is None:
        raise ValueError(
            f"Invalid log level: {level!r}. Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )
    return resolved


class JSONHandler(logging.StreamHandler):
    """One JSON object per line; `extra={"extra": {...}}` fields are merged in."""

    def emit(self, record: logging.LogRecord) -> None:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        if record.exc_info:
            payload["exc"] = logging.Formatter().formatException(record.exc_info)
        self.stream.write(json.dumps(payload, default=str) + "\n")
        self.flush()


def configure_logger(level: int | str = logging.INFO) -> None:
    resolved = resolve_level(level)
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(resolved)
    root.addHandler(JSONHandler(stream=sys.stdout))
