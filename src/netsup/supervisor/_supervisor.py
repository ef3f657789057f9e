"""Main supervisor coordinator for ordered service startup.

This module provides the Supervisor class that starts services one after
another, waits for each to be ready, idles until asked to stop and then
hands the session to the ShutdownCoordinator.
"""

from __future__ import annotations

import signal
from dataclasses import dataclass
from typing import TYPE_CHECKING, final

import anyio
import anyio.abc
import structlog

from netsup.exceptions import ShutdownError, StartupError

from ._models import ServiceEventType, ServiceState
from ._output import ConsoleOutputSink
from ._service import ServiceManager
from ._session import Session, validate_specs
from ._shutdown import ShutdownCoordinator

if TYPE_CHECKING:
    from collections.abc import Sequence

    from structlog.typing import FilteringBoundLogger

    from ._models import ServiceSpec
    from ._protocol import OutputSink


@dataclass(frozen=True, slots=True)
class RunReport:
    """Outcome of a supervisor run.

    Attributes:
        startup_error: Set when a service failed to become ready.
        shutdown_error: Set when one or more services failed to stop.
        exited_service: Name of a ready service whose process exited on
            its own, which ended the run.
        interrupted: Whether shutdown was requested before startup finished.
    """

    startup_error: StartupError | None = None
    shutdown_error: ShutdownError | None = None
    exited_service: str | None = None
    interrupted: bool = False

    @property
    def clean(self) -> bool:
        """Return whether the run started and stopped without errors."""
        return (
            self.startup_error is None
            and self.shutdown_error is None
            and self.exited_service is None
        )


@final
class Supervisor:
    """Starts an ordered set of services and keeps them up until told to stop.

    Services start strictly in sequence: a service is spawned only once
    every service before it is Ready. A startup failure aborts the session
    and stops the services already started, newest first. Uses anyio task
    groups for structured concurrency.
    """

    __slots__ = (
        "_coordinator",
        "_exited_service",
        "_handle_signals",
        "_logger",
        "_output_sink",
        "_session",
        "_shutdown_error",
        "_shutdown_event",
        "_startup_scope",
        "_stop_requested",
    )

    def __init__(
        self,
        specs: Sequence[ServiceSpec],
        output_sink: OutputSink | None = None,
        *,
        logger: FilteringBoundLogger | None = None,
        handle_signals: bool = True,
    ) -> None:
        """Check the start order and set up one manager per service.

        Args:
            specs: Services to manage, in start order.
            output_sink: Sink for service output. Uses ConsoleOutputSink if None.
            logger: Structured logger. Uses the global structlog logger if None.
            handle_signals: Whether run() turns SIGINT/SIGTERM into a shutdown.

        Raises:
            InvalidServiceSpecError: If the specs cannot be started in order.
        """
        validate_specs(specs)
        self._logger: FilteringBoundLogger = logger or structlog.get_logger("netsup")
        self._output_sink: OutputSink = output_sink or ConsoleOutputSink()
        self._session = Session(
            [ServiceManager(spec, self._output_sink, self._logger) for spec in specs]
        )
        self._coordinator = ShutdownCoordinator(self._logger)
        self._handle_signals = handle_signals
        self._shutdown_event: anyio.Event | None = None
        self._stop_requested = False
        self._startup_scope: anyio.CancelScope | None = None
        self._shutdown_error: ShutdownError | None = None
        self._exited_service: str | None = None

    @property
    def session(self) -> Session:
        """The managed services, in start order."""
        return self._session

    def get_service(self, name: str) -> ServiceManager:
        """Look up a managed service.

        Raises:
            ServiceNotFoundError: If no service exists with that name.
        """
        return self._session.get(name)

    @property
    def shutdown_requested(self) -> bool:
        """Return whether a shutdown has been requested."""
        return self._stop_requested

    def request_shutdown(self) -> None:
        """Ask the supervisor to shut down.

        Interrupts startup (including a probe's sleep) or ends the idle
        phase. Safe to call any number of times.
        """
        if not self._stop_requested:
            self._logger.info("shutdown_requested")
        self._stop_requested = True
        if self._shutdown_event is not None:
            self._shutdown_event.set()
        if self._startup_scope is not None:
            self._startup_scope.cancel()

    async def start(self, task_group: anyio.abc.TaskGroup) -> Session:
        """Start every service in order, waiting for each to be ready.

        Args:
            task_group: Task group that owns the services' helper tasks.

        Returns:
            The session with every service Ready.

        Raises:
            StartupError: If a service fails to become ready. Services
                already started have been stopped by the time it is raised.
        """
        session = self._session
        for service in session:
            unmet = session.unmet_dependencies(service)
            if unmet:
                msg = f"Service '{service.name}' has unmet dependencies: {unmet}"
                error = StartupError(msg, service_name=service.name)
                await self._abort_startup(error)
                raise error

            try:
                await service.start(task_group)
                await service.wait_ready()
            except StartupError as e:
                await self._abort_startup(e)
                raise
            finally:
                # Cancellation can land while the ready event is emitted
                if service.state == ServiceState.READY:
                    session.mark_ready(service)

        self._logger.info("startup_complete", services=[s.name for s in session])
        return session

    async def _abort_startup(self, error: StartupError) -> None:
        self._logger.error(
            "startup_failed",
            service=error.service_name,
            reason=str(error),
        )
        await self._shutdown()

    async def _shutdown(self) -> None:
        """Run the shutdown coordinator once, recording any failure."""
        try:
            await self._coordinator.shutdown(self._session)
        except ShutdownError as e:
            self._shutdown_error = e

    async def _handle_signals_task(self) -> None:
        with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:
            async for signum in signals:
                self._logger.info("signal_received", signal=signal.Signals(signum).name)
                self.request_shutdown()

    async def _watch_for_exit(self, service: ServiceManager) -> None:
        """End the run if a ready foreground service exits on its own."""
        await service.wait_exited()
        if self._stop_requested or service.state != ServiceState.READY:
            return

        exit_code = service.status.last_exit_code
        self._exited_service = service.name
        self._logger.error(
            "service_exited_unexpectedly",
            service=service.name,
            exit_code=exit_code,
        )
        await service.emit_event(
            ServiceEventType.EXITED,
            exit_code=exit_code,
            message="Exited while ready",
        )
        self.request_shutdown()

    async def run(self) -> RunReport:
        """Run the session: start, idle until asked to stop, shut down.

        Blocks until shutdown completes. Never raises ShutdownError; stop
        failures are returned in the report. Any other error still stops
        what was started before it propagates.

        Returns:
            A report describing how the run ended.
        """
        startup_error: StartupError | None = None
        interrupted = False
        self._shutdown_event = anyio.Event()
        if self._stop_requested:
            self._shutdown_event.set()

        async with anyio.create_task_group() as tg:
            if self._handle_signals:
                tg.start_soon(self._handle_signals_task)

            try:
                with anyio.CancelScope() as startup_scope:
                    self._startup_scope = startup_scope
                    if self._stop_requested:
                        startup_scope.cancel()
                    try:
                        _ = await self.start(tg)
                    except StartupError as e:
                        startup_error = e
                self._startup_scope = None

                if startup_scope.cancelled_caught:
                    interrupted = True
                    self._logger.info("startup_interrupted")

                if startup_error is None and not interrupted:
                    for service in self._session.started:
                        if not service.spec.daemonizes:
                            tg.start_soon(self._watch_for_exit, service)

                    self._logger.info("supervisor_idle")
                    await self._shutdown_event.wait()
            except Exception:
                self._logger.exception("supervisor_failed")
                raise
            finally:
                # Also reached on an unexpected error or outside cancellation
                with anyio.CancelScope(shield=True):
                    await self._shutdown()
                tg.cancel_scope.cancel()

        report = RunReport(
            startup_error=startup_error,
            shutdown_error=self._shutdown_error,
            exited_service=self._exited_service,
            interrupted=interrupted,
        )
        self._logger.info("supervisor_stopped", clean=report.clean)
        return report
