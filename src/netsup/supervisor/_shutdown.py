"""Shutdown coordinator.

Stops the services of a session in reverse start order. Runs at most once
per coordinator and cannot be interrupted by cancellation once begun.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, final

import anyio
import structlog

from netsup.exceptions import ServiceStopError, ShutdownError

from ._models import ServiceState

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ._session import Session


@final
class ShutdownCoordinator:
    """Stops a session's services, best-effort, in reverse start order.

    The first call to shutdown() does the work; later calls return
    without doing anything. Individual stop failures do not halt the
    sequence; they are collected into one ShutdownError.
    """

    __slots__ = ("_done", "_logger")

    def __init__(self, logger: FilteringBoundLogger | None = None) -> None:
        self._logger: FilteringBoundLogger = logger or structlog.get_logger("netsup")
        self._done = False

    @property
    def done(self) -> bool:
        """Return whether shutdown has already run."""
        return self._done

    async def shutdown(self, session: Session) -> None:
        """Stop every started service, newest first.

        Services that were still starting, or failed, are force cleaned
        before the ready ones are stopped.

        Args:
            session: The session whose services are stopped.

        Raises:
            ShutdownError: If one or more services failed to stop.
        """
        if self._done:
            return
        self._done = True

        with anyio.CancelScope(shield=True):
            await self._shutdown(session)

    async def _shutdown(self, session: Session) -> None:
        for service in session:
            if service.state in (ServiceState.STARTING, ServiceState.FAILED):
                await service.force_cleanup("Interrupted by shutdown")

        started = session.started
        self._logger.info(
            "shutdown_started",
            order=[service.name for service in reversed(started)],
        )

        failures: list[ServiceStopError] = []
        for service in reversed(started):
            if service.state != ServiceState.READY:
                continue
            try:
                await service.stop()
            except ServiceStopError as e:
                failures.append(e)

        if failures:
            error = ShutdownError(tuple(failures))
            self._logger.error("shutdown_failed", services=list(error.service_names))
            raise error

        self._logger.info("shutdown_complete")
