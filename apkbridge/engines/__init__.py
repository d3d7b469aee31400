"""Wrappers around the external decompiler processes."""

from .runner import EngineRunner, ProcessResult, SubprocessRunner

__all__ = ["EngineRunner", "ProcessResult", "SubprocessRunner"]
