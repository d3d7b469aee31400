"""Application wiring for the reverse-apk MCP server."""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from mcp import types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route

from . import __version__
from .api._shared import to_text_content
from .api.dispatcher import ProgressSink, ToolDispatcher
from .api.tools import INSTRUCTIONS, list_mcp_tools
from .utils.logging import configure_root

SERVER_NAME = "reverse-apk"
_LOGGER = logging.getLogger("apkbridge.server")
_CONFIGURED = False


def _progress_sink(server: Server) -> Optional[ProgressSink]:
    """Return a sink bound to the caller's progress token, if it sent one."""

    try:
        ctx = server.request_context
    except LookupError:
        return None
    token = ctx.meta.progressToken if ctx.meta is not None else None
    if token is None:
        return None

    async def _send(text: str, matches_so_far: int) -> None:
        await ctx.session.send_progress_notification(
            token,
            float(matches_so_far),
            message=text,
            related_request_id=str(ctx.request_id),
        )

    return _send


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Build a low-level MCP server whose tools all route through *dispatcher*."""

    server: Server = Server(SERVER_NAME, version=__version__, instructions=INSTRUCTIONS)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return list_mcp_tools()

    # Arguments are validated by the dispatcher against the same schemas.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> List[types.TextContent]:
        _LOGGER.info("tool.call", extra={"tool": name})
        envelope = await dispatcher.dispatch(name, arguments, progress=_progress_sink(server))
        return to_text_content(envelope)

    return server


def initialization_options(server: Server) -> InitializationOptions:
    return server.create_initialization_options(
        notification_options=NotificationOptions(tools_changed=True),
    )


DISPATCHER = ToolDispatcher()
MCP_SERVER = create_server(DISPATCHER)


def configure(level: int = logging.INFO) -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return
    configure_root(level)
    _CONFIGURED = True


async def run_stdio(server: Server = MCP_SERVER) -> None:
    configure()
    async with stdio_server() as (read_stream, write_stream):
        _LOGGER.info("Server running on stdio")
        await server.run(read_stream, write_stream, initialization_options(server))


def build_api_app(
    server: Server = MCP_SERVER, dispatcher: ToolDispatcher = DISPATCHER
) -> Starlette:
    """Starlette app exposing the MCP SSE transport and a state route."""

    transport = SseServerTransport("/messages/")

    async def handle_sse(request: Request) -> Response:
        async with transport.connect_sse(
            request.scope,
            request.receive,
            request._send,  # type: ignore[attr-defined]
        ) as streams:
            await server.run(streams[0], streams[1], initialization_options(server))
        return Response()

    async def state(_: Request) -> JSONResponse:
        output_root = dispatcher.session.snapshot()
        return JSONResponse(
            {
                "server": SERVER_NAME,
                "version": __version__,
                "tools": dispatcher.tool_names,
                "output_root": str(output_root) if output_root is not None else None,
            }
        )

    return Starlette(
        routes=[
            Route("/sse", endpoint=handle_sse, methods=["GET"]),
            Mount("/messages/", app=transport.handle_post_message),
            Route("/state", state, methods=["GET"], name="state"),
        ]
    )


def create_app() -> Starlette:
    """Factory compatible with ``uvicorn --factory``."""

    configure()
    return build_api_app()


__all__ = [
    "DISPATCHER",
    "MCP_SERVER",
    "SERVER_NAME",
    "build_api_app",
    "configure",
    "create_app",
    "create_server",
    "initialization_options",
    "run_stdio",
]
