"""Seams between the supervisor core and the outside world.

`OutputSink` receives what the daemons print and what happens to them;
`ReadinessCheck` is one observation of whether a daemon accepts requests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ._models import ServiceEvent


@runtime_checkable
class OutputSink(Protocol):
    """Consumer of daemon output lines and lifecycle events.

    Both methods are awaited from the task that reads the daemon's pipes,
    so a slow sink applies backpressure to that daemon only.
    """

    async def write_line(
        self,
        service_name: str,
        pid: int,
        stream: Literal["stdout", "stderr"],
        line: str,
    ) -> None:
        """Record one line, without its trailing newline, from a daemon's pipe."""
        ...

    async def write_event(self, service_name: str, event: ServiceEvent) -> None:
        """Record a lifecycle event such as SPAWNED, READY or STOP_FAILED."""
        ...


@runtime_checkable
class ReadinessCheck(Protocol):
    """A readiness predicate over externally observable state.

    An open port, a file on disk, a log line or an SNMP response. `False`
    means "not yet"; `ProbeError` means the check cannot succeed however
    long it is polled.
    """

    def describe(self) -> str:
        """Return the probe target, e.g. `tcp://127.0.0.1:179`."""
        ...

    async def check(self) -> bool:
        """Look once.

        Raises:
            ProbeError: If the check itself is broken.
        """
        ...
