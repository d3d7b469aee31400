from __future__ import annotations

import logging

from apkbridge import cli


def test_parser_defaults() -> None:
    args = cli.build_parser().parse_args([])
    assert args.transport == "stdio"
    assert args.host == "127.0.0.1"
    assert args.port == 8099


def test_parser_accepts_sse_options() -> None:
    args = cli.build_parser().parse_args(
        ["--transport", "sse", "--host", "0.0.0.0", "--port", "9000", "--debug"]
    )
    assert (args.transport, args.host, args.port, args.debug) == ("sse", "0.0.0.0", 9000, True)


def test_run_stdio_uses_anyio(monkeypatch) -> None:
    calls: list[str] = []

    async def fake_stdio() -> None:
        calls.append("stdio")

    def fail_factory():
        raise AssertionError("SSE app should not be built for stdio")

    args = cli.build_parser().parse_args([])
    cli.run(args, logger=logging.getLogger("test.cli"), run_stdio=fake_stdio, app_factory=fail_factory)
    assert calls == ["stdio"]


def test_run_sse_hands_app_to_uvicorn(monkeypatch) -> None:
    captured: dict[str, object] = {}
    sentinel = object()

    def fake_uvicorn_run(app, *, host, port):
        captured.update(app=app, host=host, port=port)

    monkeypatch.setattr(cli.uvicorn, "run", fake_uvicorn_run)

    async def unused_stdio() -> None:
        raise AssertionError("stdio should not run for SSE")

    args = cli.build_parser().parse_args(["--transport", "sse", "--port", "8123"])
    cli.run(
        args,
        logger=logging.getLogger("test.cli"),
        run_stdio=unused_stdio,
        app_factory=lambda: sentinel,
    )
    assert captured == {"app": sentinel, "host": "127.0.0.1", "port": 8123}
