import os
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

import pytest

from netsup.cli import CLIContext
from netsup.supervisor import ServiceEvent, ServiceEventType

PythonCommand = Callable[[str], tuple[str, ...]]


@dataclass
class RecordingOutputSink:
    """Output sink that keeps every line and event for assertions."""

    lines: list[tuple[str, str, str]] = field(default_factory=list)
    events: list[ServiceEvent] = field(default_factory=list)

    async def write_line(
        self,
        service_name: str,
        pid: int,
        stream: Literal["stdout", "stderr"],
        line: str,
    ) -> None:
        self.lines.append((service_name, stream, line))

    async def write_event(self, service_name: str, event: ServiceEvent) -> None:
        self.events.append(event)

    def event_types(self, service_name: str) -> list[ServiceEventType]:
        return [e.event_type for e in self.events if e.service_name == service_name]

    def output(self, service_name: str) -> list[str]:
        return [line for name, _, line in self.lines if name == service_name]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def recording_sink() -> RecordingOutputSink:
    return RecordingOutputSink()


@pytest.fixture
def python_command() -> PythonCommand:
    """Return a factory building a command that runs Python code."""

    def _command(code: str) -> tuple[str, ...]:
        return (sys.executable, "-c", code)

    return _command


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop NETSUP_* variables and any CLI context left by another test."""
    for key in list(os.environ):
        if key.startswith("NETSUP_"):
            monkeypatch.delenv(key)
    CLIContext.reset()
