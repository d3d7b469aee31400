"""Declared MCP tools: names, descriptions and argument contracts."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping

from mcp import types

from .validators import load_schema_document

REVERSE_APK = "reverseAPK"
SEARCH_REVERSED_CODE = "searchInReversedCode"
READ_REVERSED_FILE = "readFileFromReversedCode"

INSTRUCTIONS = (
    "This tool reverse engineers APKs using Jadx and Apktool, and allows searching "
    "for strings or reading files in the output."
)


@dataclass(frozen=True, slots=True)
class ToolSpec:
    name: str
    description: str
    request_schema: str

    def input_schema(self) -> Dict[str, object]:
        return load_schema_document(self.request_schema)

    def as_mcp_tool(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema(),
        )


TOOL_SPECS: Mapping[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec(
            name=REVERSE_APK,
            description="Reverse engineer an APK using Jadx and APKTool",
            request_schema="reverse_apk.request.v1.json",
        ),
        ToolSpec(
            name=SEARCH_REVERSED_CODE,
            description="Search for specific strings in the reversed APK output",
            request_schema="search_reversed_code.request.v1.json",
        ),
        ToolSpec(
            name=READ_REVERSED_FILE,
            description="Read a file from the reversed APK output by relative path",
            request_schema="read_reversed_file.request.v1.json",
        ),
    )
}


def list_mcp_tools() -> List[types.Tool]:
    return [spec.as_mcp_tool() for spec in TOOL_SPECS.values()]


__all__ = [
    "INSTRUCTIONS",
    "READ_REVERSED_FILE",
    "REVERSE_APK",
    "SEARCH_REVERSED_CODE",
    "TOOL_SPECS",
    "ToolSpec",
    "list_mcp_tools",
]
