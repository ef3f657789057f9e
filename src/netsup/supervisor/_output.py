"""Where daemon output and lifecycle events end up.

The supervisor never prints on its own; everything a daemon writes and
every lifecycle event goes through an `OutputSink`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, final

from rich.console import Console
from rich.style import Style
from rich.text import Text

from ._models import ServiceEventType

if TYPE_CHECKING:
    from ._models import ServiceEvent

_NAME_STYLE = Style(color="blue", bold=True)
_DETAIL_STYLE = Style(dim=True)
_STREAM_STYLES: dict[str, Style] = {
    "stdout": Style(),
    "stderr": Style(color="red", dim=True),
}

_ALARM = Style(color="red", bold=True)
_EVENT_STYLES: dict[ServiceEventType, Style] = {
    ServiceEventType.SPAWNED: Style(color="cyan"),
    ServiceEventType.READY: Style(color="green", bold=True),
    ServiceEventType.FAILED: _ALARM,
    ServiceEventType.STOPPING: Style(color="yellow", dim=True),
    ServiceEventType.STOPPED: Style(color="yellow"),
    ServiceEventType.STOP_FAILED: _ALARM,
    ServiceEventType.EXITED: Style(color="magenta"),
    ServiceEventType.CLEANED_UP: Style(color="magenta", dim=True),
}


@final
class ConsoleOutputSink:
    """Interleave every daemon's output on one rich console.

    Output lines read `[snmpd:4242] line`; stderr is dimmed red. Events
    read `[snmpd] READY (pid=4242)`, followed by the exit code and message
    when the event has them.
    """

    __slots__ = ("_console",)

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    async def write_line(
        self,
        service_name: str,
        pid: int,
        stream: Literal["stdout", "stderr"],
        line: str,
    ) -> None:
        text = Text.assemble(
            (f"[{service_name}:{pid}]", _NAME_STYLE),
            " ",
            (line, _STREAM_STYLES[stream]),
        )
        self._console.print(text)

    async def write_event(self, service_name: str, event: ServiceEvent) -> None:
        style = _EVENT_STYLES.get(event.event_type, Style())
        text = Text.assemble(
            (f"[{service_name}]", _NAME_STYLE),
            " ",
            (event.event_type.value.upper(), style),
        )

        details: list[str] = []
        if event.pid is not None:
            details.append(f"pid={event.pid}")
        if event.exit_code is not None:
            details.append(f"exit_code={event.exit_code}")
        if details:
            _ = text.append(f" ({', '.join(details)})", style=_DETAIL_STYLE)

        if event.message:
            _ = text.append(f": {event.message}", style=style)

        self._console.print(text)


@final
class NullOutputSink:
    """Discard daemon output and events, for `--quiet` runs and tests."""

    __slots__ = ()

    async def write_line(
        self,
        service_name: str,
        pid: int,
        stream: Literal["stdout", "stderr"],
        line: str,
    ) -> None:
        return None

    async def write_event(self, service_name: str, event: ServiceEvent) -> None:
        return None
