from __future__ import annotations

from pathlib import Path

import pytest

from apkbridge.features import files


def test_read_extracted_file_prefixes_path(tmp_path: Path) -> None:
    target = tmp_path / "apktool" / "res" / "values" / "strings.xml"
    target.parent.mkdir(parents=True)
    target.write_text("<resources/>\n", encoding="utf-8")

    text = files.read_extracted_file(tmp_path, "apktool/res/values/strings.xml")

    assert text == "apktool/res/values/strings.xml\n\n<resources/>\n"


def test_missing_file_raises_with_requested_path(tmp_path: Path) -> None:
    with pytest.raises(files.ExtractedFileNotFound) as excinfo:
        files.read_extracted_file(tmp_path, "jadx/Nope.java")
    assert str(excinfo.value) == "File not found: jadx/Nope.java"
    assert excinfo.value.requested == "jadx/Nope.java"


def test_directories_are_not_readable_files(tmp_path: Path) -> None:
    (tmp_path / "jadx").mkdir()
    with pytest.raises(files.ExtractedFileNotFound):
        files.read_extracted_file(tmp_path, "jadx")


def test_paths_outside_the_root_are_rejected(tmp_path: Path) -> None:
    root = tmp_path / "out"
    root.mkdir()
    (tmp_path / "secret.txt").write_text("nope", encoding="utf-8")
    with pytest.raises(files.ExtractedFileNotFound):
        files.read_extracted_file(root, "../secret.txt")
