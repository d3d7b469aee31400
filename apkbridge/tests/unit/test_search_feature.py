"""Unit tests for directory walking and literal matching."""
from __future__ import annotations

import os
from pathlib import Path

import pytest

from apkbridge.features import search
from apkbridge.utils.config import SEARCH_EXTENSIONS


def _write(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_walk_is_depth_first_and_sorted(tmp_path: Path) -> None:
    _write(tmp_path, "b.txt", "")
    _write(tmp_path, "a/z.java", "")
    _write(tmp_path, "a/b/y.smali", "")
    _write(tmp_path, "c.xml", "")
    _write(tmp_path, "ignored.png", "")
    _write(tmp_path, "upper.JAVA", "")

    found = [
        path.relative_to(tmp_path).as_posix()
        for path in search.iter_candidate_files(tmp_path, SEARCH_EXTENSIONS)
    ]

    assert found == ["a/b/y.smali", "a/z.java", "b.txt", "c.xml"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_walk_does_not_follow_directory_symlinks(tmp_path: Path) -> None:
    _write(tmp_path, "real/file.txt", "needle")
    try:
        (tmp_path / "loop").symlink_to(tmp_path, target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    found = list(search.iter_candidate_files(tmp_path, SEARCH_EXTENSIONS))
    assert [path.name for path in found] == ["file.txt"]


def test_matches_report_relative_path_and_one_based_lines(tmp_path: Path) -> None:
    _write(tmp_path, "sources/Main.java", "class Main {\r\n  String k = \"token\";\r\n}\n")

    matches = list(search.iter_matches(tmp_path, ["token"], SEARCH_EXTENSIONS))

    assert matches == [
        search.SearchMatch(
            relative_path="sources/Main.java",
            line_number=2,
            line_text='  String k = "token";',
        )
    ]


def test_only_cr_and_lf_break_lines(tmp_path: Path) -> None:
    path = tmp_path / "res/values/strings.xml"
    path.parent.mkdir(parents=True)
    path.write_bytes(
        "<string>a\u2028b</string>\n<x>\f\v\x1c\x85</x>\n<key>needle</key>\n".encode("utf-8")
    )

    matches = list(search.iter_matches(tmp_path, ["needle", "a\u2028b"], SEARCH_EXTENSIONS))

    assert [(m.line_number, m.line_text) for m in matches] == [
        (1, "<string>a\u2028b</string>"),
        (3, "<key>needle</key>"),
    ]


def test_mixed_line_endings_and_missing_final_newline(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_bytes(b"one\r\ntwo\rthree\nneedle")

    matches = list(search.iter_matches(tmp_path, ["needle"], SEARCH_EXTENSIONS))

    assert [m.line_number for m in matches] == [4]


def test_each_query_matches_independently_in_argument_order(tmp_path: Path) -> None:
    _write(tmp_path, "strings.xml", "<string>alpha beta</string>\n<x>beta</x>\n")

    matches = list(search.iter_matches(tmp_path, ["beta", "alpha"], SEARCH_EXTENSIONS))

    assert [(m.line_number, m.line_text.count("alpha")) for m in matches] == [
        (1, 1),
        (1, 1),
        (2, 0),
    ]
    assert len(matches) == 3


def test_matching_is_case_sensitive(tmp_path: Path) -> None:
    _write(tmp_path, "notes.txt", "Secret\nsecret\n")
    matches = list(search.iter_matches(tmp_path, ["secret"], SEARCH_EXTENSIONS))
    assert [m.line_number for m in matches] == [2]


def test_undecodable_bytes_do_not_abort_the_walk(tmp_path: Path) -> None:
    (tmp_path / "blob.txt").write_bytes(b"\xff\xfe needle \x80\n")
    matches = list(search.iter_matches(tmp_path, ["needle"], SEARCH_EXTENSIONS))
    assert len(matches) == 1


def test_iter_batches_flushes_full_and_trailing_batches() -> None:
    items = [search.SearchMatch("f.txt", index, "x") for index in range(1, 13)]
    batches = list(search.iter_batches(items, 5))
    assert [len(batch) for batch in batches] == [5, 5, 2]


def test_iter_batches_exact_multiple_has_no_empty_tail() -> None:
    items = [search.SearchMatch("f.txt", index, "x") for index in range(1, 11)]
    assert [len(batch) for batch in search.iter_batches(items, 5)] == [5, 5]
    assert list(search.iter_batches([], 5)) == []


def test_iter_batches_rejects_zero_size() -> None:
    with pytest.raises(ValueError):
        list(search.iter_batches([], 0))


def test_render_includes_read_hint() -> None:
    text = search.render_batch([search.SearchMatch("a/B.java", 3, "   int x;  ")])
    assert "File: `a/B.java`" in text
    assert "Line 3: int x;" in text
    assert "readFileFromReversedCode" in text


def test_resolve_search_root(tmp_path: Path) -> None:
    assert search.resolve_search_root(tmp_path) == tmp_path
    assert search.resolve_search_root(str(tmp_path / "missing")) is None
    assert search.resolve_search_root("") is None
    file_path = _write(tmp_path, "file.txt", "")
    assert search.resolve_search_root(file_path) is None


def test_summary_text() -> None:
    assert search.summary_text(0) == "No matches found for the provided strings."
    assert search.summary_text(3) == "Done. Found and streamed 3 matching line(s)."
