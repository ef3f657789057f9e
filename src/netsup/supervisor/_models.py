"""Service definitions, lifecycle states and the records a run produces."""

from __future__ import annotations

import signal
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from ._protocol import ReadinessCheck


class ServiceState(StrEnum):
    """Where a service is in its one-way lifecycle.

    A service moves forward only: it is never restarted, so STOPPED is
    final. See ALLOWED_TRANSITIONS.
    """

    PENDING = "pending"
    # Spawned, readiness not yet confirmed
    STARTING = "starting"
    READY = "ready"
    FAILED = "failed"
    STOPPED = "stopped"


ALLOWED_TRANSITIONS: dict[ServiceState, frozenset[ServiceState]] = {
    ServiceState.PENDING: frozenset({ServiceState.STARTING}),
    ServiceState.STARTING: frozenset({ServiceState.READY, ServiceState.FAILED}),
    ServiceState.READY: frozenset({ServiceState.STOPPED}),
    ServiceState.FAILED: frozenset({ServiceState.STOPPED}),
    ServiceState.STOPPED: frozenset(),
}


class ServiceEventType(StrEnum):
    """What an OutputSink is told about a service.

    EXITED is a process ending without being asked to. CLEANED_UP follows
    FAILED once a service that never became ready has been torn down.
    """

    SPAWNED = "spawned"
    READY = "ready"
    FAILED = "failed"
    STOPPING = "stopping"
    STOPPED = "stopped"
    STOP_FAILED = "stop_failed"
    EXITED = "exited"
    CLEANED_UP = "cleaned_up"


@dataclass(frozen=True, slots=True)
class ServiceEvent:
    """One lifecycle event, as handed to the OutputSink.

    Attributes:
        service_name: Name of the service that generated the event.
        event_type: Type of lifecycle event.
        timestamp: ISO 8601 formatted timestamp.
        pid: Process ID if applicable.
        exit_code: Exit code if process terminated.
        message: Optional human-readable message.
    """

    service_name: str
    event_type: ServiceEventType
    timestamp: str
    pid: int | None = None
    exit_code: int | None = None
    message: str | None = None


@dataclass(frozen=True, slots=True)
class ServiceSpec:
    """Definition of a supervised service.

    Immutable once loaded. Describes how the service is started, how its
    readiness is observed, and how it is stopped.

    Attributes:
        name: Unique identifier for the service.
        command: Command and arguments that start the service.
        readiness: Check confirming the service accepts requests. When None
            the service is ready as soon as it has been started.
        startup_timeout: Seconds the service has to become ready.
        probe_interval: Seconds between readiness checks.
        probe_backoff: Multiplier applied to the interval after each failed
            check. 1.0 keeps the interval fixed.
        probe_max_interval: Upper bound for the interval when backing off.
        stop_command: Command that stops the service, if any.
        stop_signal: Signal sent to the service process on stop.
        shutdown_timeout: Seconds to wait for the service to stop.
        requires: Names of earlier services that must be ready first.
        daemonizes: Whether the start command forks a daemon and exits.
        required_files: Paths that must exist before the service starts.
        cwd: Working directory for the process.
        env: Additional environment variables.
    """

    name: str
    command: tuple[str, ...]
    readiness: ReadinessCheck | None = None
    startup_timeout: float = 10.0
    probe_interval: float = 0.5
    probe_backoff: float = 1.0
    probe_max_interval: float = 5.0
    stop_command: tuple[str, ...] | None = None
    stop_signal: signal.Signals = signal.SIGTERM
    shutdown_timeout: float = 5.0
    requires: tuple[str, ...] = ()
    daemonizes: bool = False
    required_files: tuple[Path, ...] = ()
    cwd: Path | None = None
    env: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class ServiceStatus:
    """Mutable runtime status of a service.

    Attributes:
        state: Current service state.
        pid: Process ID of the start command, while it runs.
        last_exit_code: Exit code from the last process termination.
        probe_attempts: Number of readiness checks performed.
        started_at: ISO 8601 timestamp of the start.
        ready_at: ISO 8601 timestamp of readiness.
        stopped_at: ISO 8601 timestamp of the stop.
        error: Text of the last failure, if any.
    """

    state: ServiceState = ServiceState.PENDING
    pid: int | None = None
    last_exit_code: int | None = None
    probe_attempts: int = 0
    started_at: str | None = None
    ready_at: str | None = None
    stopped_at: str | None = None
    error: str | None = None
