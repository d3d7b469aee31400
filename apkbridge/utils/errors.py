"""Error codes and helpers for the reverse-apk server."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, MutableMapping, Optional, Sequence


class ErrorCode(str, Enum):
    """Stable error codes carried by failed tool results."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    NOT_READY = "NOT_READY"
    INVALID_DIRECTORY = "INVALID_DIRECTORY"
    ARTIFACT_NOT_FOUND = "ARTIFACT_NOT_FOUND"
    NOT_FOUND = "NOT_FOUND"
    ENGINE_FAILED = "ENGINE_FAILED"
    INTERNAL = "INTERNAL"


@dataclass(frozen=True)
class ErrorTemplate:
    """Default message and recovery hints for an error code."""

    message: str
    recovery: Sequence[str] = ()


_TEMPLATES: Mapping[ErrorCode, ErrorTemplate] = {
    ErrorCode.INVALID_REQUEST: ErrorTemplate(
        message="Request was malformed or failed validation.",
        recovery=("Check required fields and value formats.",),
    ),
    ErrorCode.UNKNOWN_TOOL: ErrorTemplate(
        message="Unknown tool.",
        recovery=("List the available tools and retry with one of their names.",),
    ),
    ErrorCode.NOT_READY: ErrorTemplate(
        message="No reversed directory found. Please run reverseAPK first.",
    ),
    ErrorCode.INVALID_DIRECTORY: ErrorTemplate(
        message=(
            "Provided path is not a valid directory. "
            "Run reverseAPK first or specify a directory."
        ),
    ),
    ErrorCode.ARTIFACT_NOT_FOUND: ErrorTemplate(
        message="APK file not found.",
        recovery=("Pass an absolute path to an existing .apk file.",),
    ),
    ErrorCode.NOT_FOUND: ErrorTemplate(
        message="File not found.",
        recovery=("Use a relative path reported by searchInReversedCode.",),
    ),
    ErrorCode.ENGINE_FAILED: ErrorTemplate(
        message="Decompiler exited with a non-zero status.",
        recovery=("Check that the APK is valid and the decompiler is installed.",),
    ),
    ErrorCode.INTERNAL: ErrorTemplate(
        message="Internal server error.",
        recovery=("Retry the request or inspect the server log.",),
    ),
}


def _resolve_template(code: ErrorCode) -> ErrorTemplate:
    try:
        return _TEMPLATES[code]
    except KeyError:  # pragma: no cover
        raise ValueError(f"No error template registered for {code!s}") from None


def make_error(
    code: ErrorCode,
    message: Optional[str] = None,
    *,
    recovery: Optional[Iterable[str]] = None,
) -> Dict[str, object]:
    """Create a JSON-serialisable error dict."""

    template = _resolve_template(code)
    resolved_message = message if message is not None else template.message
    resolved_recovery: List[str] = list(recovery) if recovery is not None else list(
        template.recovery
    )
    payload: MutableMapping[str, object] = {
        "code": code.value,
        "message": resolved_message,
        "recovery": resolved_recovery,
    }
    return dict(payload)


class ToolCallFailed(RuntimeError):
    """Raised at the MCP boundary so the SDK reports ``isError=true``."""

    def __init__(self, code: ErrorCode, text: str) -> None:
        super().__init__(text)
        self.code = code


__all__ = ["ErrorCode", "ErrorTemplate", "ToolCallFailed", "make_error"]
