"""Read single files out of an extraction output root."""
from __future__ import annotations

from pathlib import Path


class ExtractedFileNotFound(LookupError):
    """Raised when a relative path does not name a file under the root."""

    def __init__(self, requested: str) -> None:
        super().__init__(f"File not found: {requested}")
        self.requested = requested


def resolve_extracted_file(root: Path, relative_path: str) -> Path:
    root = root.resolve()
    candidate = (root / relative_path).resolve()
    if candidate != root and root not in candidate.parents:
        raise ExtractedFileNotFound(relative_path)
    if not candidate.is_file():
        raise ExtractedFileNotFound(relative_path)
    return candidate


def read_extracted_file(root: Path, relative_path: str) -> str:
    """Return the file text prefixed with the requested path."""

    path = resolve_extracted_file(root, relative_path)
    content = path.read_text(encoding="utf-8", errors="replace")
    return f"{relative_path}\n\n{content}"


__all__ = ["ExtractedFileNotFound", "read_extracted_file", "resolve_extracted_file"]
