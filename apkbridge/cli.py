"""Command line entry point for the reverse-apk MCP server."""
from __future__ import annotations

import argparse
import logging
from typing import Awaitable, Callable, Sequence

import anyio
import uvicorn
from starlette.applications import Starlette

from .utils.config import DEBUG

AppFactory = Callable[[], Starlette]
RunStdIO = Callable[[], Awaitable[None]]

LOGGER = logging.getLogger("apkbridge.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reverse engineer APKs with jadx and apktool over MCP"
    )
    parser.add_argument(
        "--transport",
        type=str,
        default="stdio",
        choices=["stdio", "sse"],
        help="MCP transport, default: stdio",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host for the SSE server, default: 127.0.0.1",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8099,
        help="Port for the SSE server, default: 8099",
    )
    parser.add_argument(
        "--debug", action="store_true", default=DEBUG, help="Enable debug logging"
    )
    return parser


def run(
    args: argparse.Namespace,
    *,
    logger: logging.Logger,
    run_stdio: RunStdIO,
    app_factory: AppFactory,
) -> None:
    """Start the selected transport."""
    if args.debug:
        logging.getLogger("apkbridge").setLevel(logging.DEBUG)

    if args.transport == "sse":
        app = app_factory()
        logger.info("[MCP] SSE endpoint on http://%s:%s/sse", args.host, args.port)
        uvicorn.run(app, host=args.host, port=int(args.port))
    else:
        logger.info("[MCP] Running in stdio mode.")
        anyio.run(run_stdio)


def main(argv: Sequence[str] | None = None) -> None:
    from .app import configure, create_app, run_stdio

    args = build_parser().parse_args(argv)
    configure(logging.DEBUG if args.debug else logging.INFO)
    try:
        run(args, logger=LOGGER, run_stdio=run_stdio, app_factory=create_app)
    except KeyboardInterrupt:
        LOGGER.info("Server stopped by user")


if __name__ == "__main__":  # pragma: no cover - script entry point
    main()


__all__ = ["build_parser", "main", "run"]
