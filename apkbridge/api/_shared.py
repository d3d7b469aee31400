"""Result envelopes shared by the dispatcher and the MCP boundary."""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable, List, Union

from mcp import types

from ..utils.errors import ErrorCode, ToolCallFailed, make_error


@dataclass(frozen=True, slots=True)
class Ok:
    """Successful tool outcome: ordered human-readable text blocks."""

    content: tuple[str, ...]
    is_error: ClassVar[bool] = False


@dataclass(frozen=True, slots=True)
class Err:
    """Failed tool outcome; ``content`` only ever describes the failure."""

    code: ErrorCode
    message: str
    content: tuple[str, ...]
    is_error: ClassVar[bool] = True

    @property
    def text(self) -> str:
        return "\n".join(self.content)


Envelope = Union[Ok, Err]


def envelope_ok(*blocks: str) -> Ok:
    return Ok(content=tuple(blocks))


def envelope_error(
    code: ErrorCode,
    message: str | None = None,
    *,
    detail: Iterable[str] = (),
    recovery: tuple[str, ...] | None = None,
) -> Err:
    error_payload = make_error(code, message=message, recovery=recovery)
    resolved = str(error_payload["message"])
    hints = [f"Hint: {hint}" for hint in error_payload["recovery"]]  # type: ignore[union-attr]
    return Err(code=code, message=resolved, content=(resolved, *detail, *hints))


def to_text_content(envelope: Envelope) -> List[types.TextContent]:
    """Convert an envelope into MCP content, raising for failures.

    The MCP SDK turns an exception raised by a tool handler into a
    ``CallToolResult`` with ``isError`` set and the exception text as content.
    """

    if isinstance(envelope, Err):
        raise ToolCallFailed(envelope.code, envelope.text)
    return [types.TextContent(type="text", text=block) for block in envelope.content]


__all__ = ["Envelope", "Err", "Ok", "envelope_error", "envelope_ok", "to_text_content"]
