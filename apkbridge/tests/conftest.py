"""Shared fixtures: repository import path, isolated event log and dispatchers."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Optional

import pytest


ROOT = Path(__file__).resolve().parents[1]
REPO_ROOT = ROOT.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from apkbridge.api.dispatcher import ToolDispatcher  # noqa: E402
from apkbridge.tests.fixtures.fake_engines import FakeRunner  # noqa: E402
from apkbridge.utils.config import Settings  # noqa: E402
from apkbridge.utils.eventlog import get_event_log_path, set_event_log_path  # noqa: E402
from apkbridge.utils.session import SessionState  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    """Force the anyio pytest plugin to use the asyncio backend."""
    return "asyncio"


@pytest.fixture(autouse=True)
def event_log(tmp_path: Path):
    previous = get_event_log_path()
    path = tmp_path / "events.log"
    set_event_log_path(path)
    try:
        yield path
    finally:
        set_event_log_path(previous)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        jadx_bin="jadx",
        apktool_bin="apktool",
        work_dir=tmp_path / "work",
        search_batch_size=5,
    )


@pytest.fixture
def apk_file(tmp_path: Path) -> Path:
    path = tmp_path / "inputs" / "demo.apk"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"PK\x03\x04 not really a zip")
    return path


@pytest.fixture
def make_dispatcher(settings: Settings) -> Callable[..., ToolDispatcher]:
    def _factory(
        runner: Optional[FakeRunner] = None,
        session: Optional[SessionState] = None,
    ) -> ToolDispatcher:
        return ToolDispatcher(
            session if session is not None else SessionState(),
            runner=runner if runner is not None else FakeRunner(),
            settings=settings,
        )

    return _factory
