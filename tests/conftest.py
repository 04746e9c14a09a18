"""Shared test fixtures for repohistory tests."""

import logging
from dataclasses import dataclass
from typing import Any

import pytest
import structlog
from structlog.testing import CapturingLogger
from structlog.typing import FilteringBoundLogger

from repohistory.config import Config
from repohistory.git import FakeRunner, GitDataSource, GitExecutable


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@dataclass(slots=True)
class CapturedLogs:
    """Structured events recorded by a capturing logger."""

    sink: CapturingLogger

    def events(self, level: str | None = None) -> list[dict[str, Any]]:
        return [
            dict(call.kwargs)
            for call in self.sink.calls
            if level is None or call.method_name == level
        ]

    def names(self, level: str | None = None) -> list[str]:
        return [event["event"] for event in self.events(level)]


@pytest.fixture
def captured_logs() -> CapturedLogs:
    return CapturedLogs(sink=CapturingLogger())


@pytest.fixture
def capturing_logger(captured_logs: CapturedLogs) -> FilteringBoundLogger:
    """A debug-level logger whose events land in `captured_logs`."""
    return structlog.wrap_logger(
        captured_logs.sink,
        processors=[],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
    )


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def git_executable() -> GitExecutable:
    return GitExecutable(path="git", version="2.43.0")


@pytest.fixture
def make_source(
    fake_runner: FakeRunner,
    git_executable: GitExecutable,
    capturing_logger: FilteringBoundLogger,
):
    """Return a factory for data sources backed by `fake_runner`."""

    def _make(config: dict[str, Any] | None = None) -> GitDataSource:
        return GitDataSource(
            Config.from_dict(config or {}),
            git_executable,
            capturing_logger,
            runner=fake_runner,
        )

    return _make


@pytest.fixture
def source(make_source) -> GitDataSource:
    return make_source()
