"""Literal substring search over decompiled output."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from ..utils.logging import increment_counter

logger = logging.getLogger("apkbridge.search")

READ_TOOL_NAME = "readFileFromReversedCode"

# Only CR, LF and CRLF end a line; form feeds and U+2028 stay inside it.
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True, slots=True)
class SearchMatch:
    relative_path: str
    line_number: int
    line_text: str

    def render(self) -> str:
        return (
            f"File: `{self.relative_path}`\n"
            f"Line {self.line_number}: {self.line_text.strip()}\n"
            f"Use this path with `{READ_TOOL_NAME}`: `{self.relative_path}`"
        )


def render_batch(batch: Sequence[SearchMatch]) -> str:
    return "\n\n".join(match.render() for match in batch)


def resolve_search_root(directory: Path | str) -> Path | None:
    """Return *directory* as a path if it is an existing directory."""

    if not str(directory).strip():
        return None
    root = Path(directory).expanduser()
    if not root.is_dir():
        return None
    return root


def iter_candidate_files(root: Path, extensions: Sequence[str]) -> Iterator[Path]:
    """Yield files under *root* depth-first, siblings sorted by name.

    Symlinked directories are skipped so a link cycle cannot recurse forever.
    """

    suffixes = tuple(extensions)
    try:
        entries = sorted(root.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        logger.warning("search.unreadable_dir", extra={"path": str(root), "error": str(exc)})
        return
    for entry in entries:
        if entry.is_dir():
            if entry.is_symlink():
                continue
            yield from iter_candidate_files(entry, suffixes)
        elif entry.name.endswith(suffixes):
            yield entry


def _read_lines(path: Path) -> List[str] | None:
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("search.unreadable_file", extra={"path": str(path), "error": str(exc)})
        return None
    lines = _LINE_BREAK.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def iter_matches(
    root: Path, queries: Sequence[str], extensions: Sequence[str]
) -> Iterator[SearchMatch]:
    """Yield every (line, query) hit in walk order.

    A line matching several queries is reported once per query, in the order
    the queries were given. Matching is case-sensitive.
    """

    for path in iter_candidate_files(root, extensions):
        lines = _read_lines(path)
        if lines is None:
            continue
        increment_counter("search.files_scanned")
        relative = path.relative_to(root).as_posix()
        for index, line in enumerate(lines, start=1):
            for query in queries:
                if query in line:
                    yield SearchMatch(relative_path=relative, line_number=index, line_text=line)


def iter_batches(matches: Iterable[SearchMatch], size: int) -> Iterator[List[SearchMatch]]:
    """Group *matches* into lists of *size*, with a trailing partial list."""

    if size < 1:
        raise ValueError("batch size must be at least 1")
    batch: List[SearchMatch] = []
    for match in matches:
        batch.append(match)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch


def summary_text(total: int) -> str:
    if total:
        return f"Done. Found and streamed {total} matching line(s)."
    return "No matches found for the provided strings."


__all__ = [
    "SearchMatch",
    "iter_batches",
    "iter_candidate_files",
    "iter_matches",
    "render_batch",
    "resolve_search_root",
    "summary_text",
]
