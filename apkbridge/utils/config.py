"""Runtime configuration helpers for the reverse-apk server."""
from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Optional


def _parse_bool(value: str | None, *, default: bool = False) -> bool:
    if value is None:
        return default
    value = value.strip().lower()
    return value in {"1", "true", "yes", "on"}


def _parse_int(value: str | None, *, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(name: str, *, default: bool = False) -> bool:
    return _parse_bool(os.getenv(name), default=default)


def _env_int(name: str, *, default: int) -> int:
    return _parse_int(os.getenv(name), default=default)


def _env_str(name: str, *, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


JADX_BIN: Final[str] = _env_str("APK_BRIDGE_JADX", default="jadx")
APKTOOL_BIN: Final[str] = _env_str("APK_BRIDGE_APKTOOL", default="apktool")
WORK_DIR: Final[Path] = Path(
    _env_str("APK_BRIDGE_WORK_DIR", default=tempfile.gettempdir())
).expanduser()
SEARCH_BATCH_SIZE: Final[int] = max(1, _env_int("APK_BRIDGE_SEARCH_BATCH_SIZE", default=5))
DEBUG: Final[bool] = _env_bool("APK_BRIDGE_DEBUG", default=False)


def _event_log_path() -> Optional[Path]:
    # An explicitly empty value disables the event log file.
    value = os.getenv("APK_BRIDGE_EVENT_LOG")
    if value is None:
        return Path(tempfile.gettempdir()) / "mcp-reverse.log"
    if not value.strip():
        return None
    return Path(value.strip()).expanduser()


EVENT_LOG_PATH: Final[Optional[Path]] = _event_log_path()

SEARCH_EXTENSIONS: Final[tuple[str, ...]] = (".java", ".smali", ".xml", ".txt")


@dataclass(frozen=True, slots=True)
class Settings:
    """Snapshot of the knobs the tool handlers depend on."""

    jadx_bin: str = JADX_BIN
    apktool_bin: str = APKTOOL_BIN
    work_dir: Path = WORK_DIR
    search_batch_size: int = SEARCH_BATCH_SIZE
    search_extensions: tuple[str, ...] = SEARCH_EXTENSIONS


__all__ = [
    "APKTOOL_BIN",
    "DEBUG",
    "EVENT_LOG_PATH",
    "JADX_BIN",
    "SEARCH_BATCH_SIZE",
    "SEARCH_EXTENSIONS",
    "Settings",
    "WORK_DIR",
]
