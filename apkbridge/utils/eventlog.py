"""Append-only event log for decompiler runs and searches."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .config import EVENT_LOG_PATH
from .logging import current_request

logger = logging.getLogger("apkbridge.events")

_event_log_path: Optional[Path] = EVENT_LOG_PATH


def set_event_log_path(path: Path | str | None) -> None:
    """Override the event log location (mainly for tests)."""

    global _event_log_path
    if path is None:
        _event_log_path = None
        return
    _event_log_path = Path(path).expanduser()


def get_event_log_path() -> Optional[Path]:
    """Return the currently configured event log path."""

    return _event_log_path


def _write_line(line: str) -> None:
    if _event_log_path is None:
        return
    try:
        _event_log_path.parent.mkdir(parents=True, exist_ok=True)
        with _event_log_path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")
    except OSError:
        logger.exception("Failed to write event log entry", extra={"path": str(_event_log_path)})


def record_event(message: str, *, level: int = logging.INFO) -> str:
    """Append a timestamped line to the event log and mirror it to stderr.

    Returns the formatted line so callers and tests can inspect it.
    """

    line = f"[{datetime.now(timezone.utc).isoformat()}] {message}"
    _write_line(line)
    context = current_request()
    extra = context.extra(event="event_log") if context is not None else None
    logger.log(level, "%s", message, extra=extra)
    return line


__all__ = ["get_event_log_path", "record_event", "set_event_log_path"]
