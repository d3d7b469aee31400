"""Validate tool calls, route them to features and normalise the outcome."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Protocol

from ..engines.runner import EngineRunner, SubprocessRunner
from ..features import extract, files, search
from ..utils.config import Settings
from ..utils.errors import ErrorCode
from ..utils.eventlog import record_event
from ..utils.logging import RequestContext, request_scope
from ..utils.session import NoExtractionError, SessionState
from ._shared import Envelope, envelope_error, envelope_ok
from .tools import READ_REVERSED_FILE, REVERSE_APK, SEARCH_REVERSED_CODE, TOOL_SPECS
from .validators import validate_payload


class ProgressSink(Protocol):
    """Receives one rendered chunk of matches and the running match count."""

    def __call__(self, text: str, matches_so_far: int) -> Awaitable[None]:
        ...


class _ProgressRelay:
    """Forward chunks to an optional sink; a failing sink is dropped, not fatal."""

    def __init__(self, sink: Optional[ProgressSink], logger: logging.Logger) -> None:
        self._sink = sink
        self._logger = logger
        self.emitted = 0

    async def emit(self, text: str, matches_so_far: int) -> None:
        if self._sink is None:
            return
        try:
            await self._sink(text, matches_so_far)
        except Exception:
            self._logger.warning("progress.sink_failed", exc_info=True)
            self._sink = None
            return
        self.emitted += 1


Handler = Callable[[Dict[str, Any], RequestContext, Optional[ProgressSink]], Awaitable[Envelope]]


class ToolDispatcher:
    """Entry point for every tool call.

    Holds the :class:`SessionState` shared by the three tools. Calls are
    expected one at a time; nothing here is safe for overlapping requests.
    """

    def __init__(
        self,
        session: Optional[SessionState] = None,
        *,
        runner: Optional[EngineRunner] = None,
        settings: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.session = session if session is not None else SessionState()
        self.runner: EngineRunner = runner if runner is not None else SubprocessRunner()
        self.settings = settings if settings is not None else Settings()
        self.logger = logger or logging.getLogger("apkbridge.dispatch")
        self._handlers: Mapping[str, Handler] = {
            REVERSE_APK: self._handle_reverse_apk,
            SEARCH_REVERSED_CODE: self._handle_search,
            READ_REVERSED_FILE: self._handle_read_file,
        }

    @property
    def tool_names(self) -> list[str]:
        return list(self._handlers)

    async def dispatch(
        self,
        name: str,
        arguments: Any = None,
        *,
        progress: Optional[ProgressSink] = None,
    ) -> Envelope:
        spec = TOOL_SPECS.get(name)
        handler = self._handlers.get(name)
        if spec is None or handler is None:
            self.logger.warning("dispatch.unknown_tool", extra={"tool": name})
            return envelope_error(ErrorCode.UNKNOWN_TOOL, f"Unknown tool: {name}")

        payload = arguments if arguments is not None else {}
        with request_scope(name, logger=self.logger, extra={"tool": name}) as ctx:
            valid, errors = validate_payload(spec.request_schema, payload)
            if not valid:
                ctx.log(logging.WARNING, "dispatch.invalid_request", extra={"errors": errors})
                return envelope_error(
                    ErrorCode.INVALID_REQUEST,
                    f"Invalid input to {name}",
                    detail=errors,
                )
            try:
                return await handler(dict(payload), ctx, progress)
            except Exception:
                self.logger.exception("dispatch.handler_failed", extra=ctx.extra())
                return envelope_error(ErrorCode.INTERNAL)

    # ==================== reverseAPK ====================

    async def _handle_reverse_apk(
        self,
        args: Dict[str, Any],
        ctx: RequestContext,
        progress: Optional[ProgressSink],
    ) -> Envelope:
        requested = args["file"]
        artifact = Path(requested).expanduser()
        if not artifact.is_file():
            return envelope_error(
                ErrorCode.ARTIFACT_NOT_FOUND, f"APK file not found: {requested}"
            )

        result = await extract.extract_apk(
            artifact, runner=self.runner, settings=self.settings
        )
        if not result.success:
            diagnostic = result.secondary.diagnostic if result.secondary else "unknown error"
            return envelope_error(ErrorCode.ENGINE_FAILED, f"APKTool failed: {diagnostic}")

        self.session.remember(result.output_root)
        ctx.log(logging.INFO, "session.updated", extra={"output_root": str(result.output_root)})
        return envelope_ok(result.render())

    # ==================== searchInReversedCode ====================

    async def _handle_search(
        self,
        args: Dict[str, Any],
        ctx: RequestContext,
        progress: Optional[ProgressSink],
    ) -> Envelope:
        queries = list(args["queryStrings"])
        directory = args.get("directory")
        if directory is not None:
            root = search.resolve_search_root(directory)
        else:
            current = self.session.snapshot()
            root = search.resolve_search_root(current) if current is not None else None
        if root is None:
            return envelope_error(ErrorCode.INVALID_DIRECTORY)

        relay = _ProgressRelay(progress, self.logger)
        total = 0
        matches = search.iter_matches(root, queries, self.settings.search_extensions)
        for batch in search.iter_batches(matches, self.settings.search_batch_size):
            total += len(batch)
            await relay.emit(search.render_batch(batch), total)

        ctx.increment("search.matches", total)
        ctx.increment("search.chunks", relay.emitted)
        record_event(f"Search finished in {root}: {total} match(es)")
        return envelope_ok(search.summary_text(total))

    # ==================== readFileFromReversedCode ====================

    async def _handle_read_file(
        self,
        args: Dict[str, Any],
        ctx: RequestContext,
        progress: Optional[ProgressSink],
    ) -> Envelope:
        try:
            root = self.session.require()
        except NoExtractionError:
            return envelope_error(ErrorCode.NOT_READY)

        requested = args["filePath"]
        try:
            text = files.read_extracted_file(root, requested)
        except files.ExtractedFileNotFound as exc:
            return envelope_error(ErrorCode.NOT_FOUND, str(exc))
        return envelope_ok(text)


__all__ = ["ProgressSink", "ToolDispatcher"]
