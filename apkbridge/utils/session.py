"""Tracks the output root of the most recent successful extraction."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class NoExtractionError(RuntimeError):
    """Raised when an operation needs a prior extraction and none exists."""

    def __init__(self) -> None:
        super().__init__("No reversed directory found. Please run reverseAPK first.")


@dataclass(slots=True)
class SessionState:
    """Single remembered output root, owned by one dispatcher.

    Tool calls are handled one at a time, so the slot needs no lock. Only a
    successful extraction writes it; search and file reads only look.
    """

    output_root: Path | None = None

    def remember(self, output_root: Path | str) -> None:
        self.output_root = Path(output_root)

    def require(self) -> Path:
        """Return the current output root or raise :class:`NoExtractionError`."""

        if self.output_root is None:
            raise NoExtractionError()
        return self.output_root

    def clear(self) -> None:
        """Forget the current output root (useful for tests)."""

        self.output_root = None

    def snapshot(self) -> Path | None:
        return self.output_root


__all__ = ["NoExtractionError", "SessionState"]
