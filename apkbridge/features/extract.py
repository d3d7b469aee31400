"""Decompile an APK with jadx and apktool and summarise its manifest."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from ..engines.runner import EngineRunner, ProcessResult
from ..utils.config import Settings
from ..utils.eventlog import record_event
from ..utils.logging import increment_counter

logger = logging.getLogger("apkbridge.extract")

UNKNOWN = "Unknown"
MANIFEST_NAME = "AndroidManifest.xml"
MANIFEST_WARNING = "Failed to parse AndroidManifest.xml."

PRIMARY_SUBDIR = "jadx"
SECONDARY_SUBDIR = "apktool"

_PACKAGE_PATTERN = re.compile(r'package="([^"]+)"')
_VERSION_NAME_PATTERN = re.compile(r'android:versionName="([^"]+)"')
_VERSION_CODE_PATTERN = re.compile(r'android:versionCode="([^"]+)"')


@dataclass(frozen=True, slots=True)
class ManifestSummary:
    package: str = UNKNOWN
    version_name: str = UNKNOWN
    version_code: str = UNKNOWN

    def render(self) -> str:
        return (
            "Manifest Summary\n"
            f"- Package: {self.package}\n"
            f"- Version Name: {self.version_name}\n"
            f"- Version Code: {self.version_code}"
        )


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Outcome of one extraction run; never mutated after creation."""

    output_root: Path
    primary_dir: Path
    secondary_dir: Path
    success: bool
    primary: Optional[ProcessResult] = None
    secondary: Optional[ProcessResult] = None
    manifest: Optional[ManifestSummary] = None
    manifest_warning: Optional[str] = None

    def render(self) -> str:
        lines = [
            "Reverse engineering completed.",
            "",
            "Output folders:",
            f"- Jadx: {self.primary_dir}",
            f"- APKTool: {self.secondary_dir}",
            "",
        ]
        if self.manifest is not None:
            lines.append(self.manifest.render())
        else:
            lines.append(self.manifest_warning or MANIFEST_WARNING)
        return "\n".join(lines)


def artifact_stem(artifact: Path) -> str:
    """Return the file name with a trailing ``.apk`` removed."""

    name = artifact.name
    if name.endswith(".apk") and len(name) > len(".apk"):
        return name[: -len(".apk")]
    return name


def output_root_for(artifact: Path, work_dir: Path) -> Path:
    return work_dir / artifact_stem(artifact)


def parse_manifest(text: str) -> ManifestSummary:
    """Pull the package id and version fields out of decoded manifest XML.

    Fields that are absent read as ``Unknown``; a malformed document is not an
    error because only attribute patterns are inspected.
    """

    def _field(pattern: re.Pattern[str]) -> str:
        match = pattern.search(text)
        return match.group(1) if match else UNKNOWN

    return ManifestSummary(
        package=_field(_PACKAGE_PATTERN),
        version_name=_field(_VERSION_NAME_PATTERN),
        version_code=_field(_VERSION_CODE_PATTERN),
    )


def read_manifest_summary(
    secondary_dir: Path,
) -> Tuple[Optional[ManifestSummary], Optional[str]]:
    manifest_path = secondary_dir / MANIFEST_NAME
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        record_event(f"Failed to parse manifest: {exc}", level=logging.WARNING)
        return None, MANIFEST_WARNING
    return parse_manifest(text), None


def _engine_commands(
    artifact: Path, primary_dir: Path, secondary_dir: Path, settings: Settings
) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    primary = (settings.jadx_bin, "-d", str(primary_dir), str(artifact))
    secondary = (settings.apktool_bin, "d", "-f", "-o", str(secondary_dir), str(artifact))
    return primary, secondary


async def extract_apk(
    artifact: Path,
    *,
    runner: EngineRunner,
    settings: Settings,
) -> ExtractionResult:
    """Run jadx, then apktool, against *artifact*.

    A jadx failure is logged and the pipeline carries on; an apktool failure
    ends the run with ``success=False``. apktool never starts before jadx has
    exited.
    """

    output_root = output_root_for(artifact, settings.work_dir)
    primary_dir = output_root / PRIMARY_SUBDIR
    secondary_dir = output_root / SECONDARY_SUBDIR
    primary_dir.mkdir(parents=True, exist_ok=True)
    secondary_dir.mkdir(parents=True, exist_ok=True)

    primary_cmd, secondary_cmd = _engine_commands(
        artifact, primary_dir, secondary_dir, settings
    )

    primary = await runner.run(primary_cmd)
    if not primary.ok:
        increment_counter("extract.primary_failures")
        record_event(
            f"Jadx exited with non-zero code (continuing): {primary.returncode}",
            level=logging.WARNING,
        )
        record_event(f"stderr: {primary.stderr}", level=logging.WARNING)
        record_event(f"stdout: {primary.stdout}", level=logging.WARNING)

    secondary = await runner.run(secondary_cmd)
    if not secondary.ok:
        record_event(f"APKTool failed: {secondary.diagnostic}", level=logging.ERROR)
        return ExtractionResult(
            output_root=output_root,
            primary_dir=primary_dir,
            secondary_dir=secondary_dir,
            success=False,
            primary=primary,
            secondary=secondary,
        )

    manifest, warning = read_manifest_summary(secondary_dir)
    logger.info(
        "extract.complete",
        extra={"output_root": str(output_root), "primary_ok": primary.ok},
    )
    return ExtractionResult(
        output_root=output_root,
        primary_dir=primary_dir,
        secondary_dir=secondary_dir,
        success=True,
        primary=primary,
        secondary=secondary,
        manifest=manifest,
        manifest_warning=warning,
    )


__all__ = [
    "ExtractionResult",
    "MANIFEST_WARNING",
    "ManifestSummary",
    "UNKNOWN",
    "artifact_stem",
    "extract_apk",
    "output_root_for",
    "parse_manifest",
    "read_manifest_summary",
]
