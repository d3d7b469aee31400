"""Run external decompilers and capture their exit status and output."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

from ..utils.logging import increment_counter, scoped_timer

logger = logging.getLogger("apkbridge.engines")

# Conventional shell status for "command not found".
MISSING_EXECUTABLE = 127


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Outcome of one engine invocation."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def diagnostic(self) -> str:
        """Best available explanation for a failed run."""

        return self.stderr.strip() or self.stdout.strip() or f"exit status {self.returncode}"


class EngineRunner(Protocol):
    async def run(self, argv: Sequence[str]) -> ProcessResult:
        ...


class SubprocessRunner:
    """Run engines as child processes and wait for each to finish."""

    async def run(self, argv: Sequence[str]) -> ProcessResult:
        command = tuple(str(part) for part in argv)
        increment_counter("engine.invocations")
        with scoped_timer(logger, f"engine.{command[0]}", extra={"argv": list(command)}):
            try:
                process = await asyncio.create_subprocess_exec(
                    *command,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as exc:
                logger.warning("engine.spawn_failed", extra={"argv": list(command)})
                return ProcessResult(
                    argv=command,
                    returncode=MISSING_EXECUTABLE,
                    stderr=f"Failed to start {command[0]}: {exc}",
                )
            stdout, stderr = await process.communicate()

        return ProcessResult(
            argv=command,
            returncode=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace") if stdout else "",
            stderr=stderr.decode("utf-8", errors="replace") if stderr else "",
        )


__all__ = ["EngineRunner", "MISSING_EXECUTABLE", "ProcessResult", "SubprocessRunner"]
