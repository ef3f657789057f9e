"""Supervisor package for ordered network-service startup.

This package starts a small, ordered set of services with structured
concurrency, waits for each one to become ready before starting the next,
and stops them in reverse order on shutdown.

Key Components:
    - ServiceSpec: Immutable definition of a managed service
    - ServiceState: Lifecycle state enumeration
    - ServiceStatus: Runtime status tracking
    - ServiceEvent: Lifecycle event records
    - ReadinessCheck: Protocol for readiness predicates
    - TcpPortCheck, SnmpCheck, CommandCheck, FileCheck, LogLineCheck:
      Readiness check implementations
    - probe: Bounded polling of a readiness check
    - OutputSink: Protocol for output consumption
    - ConsoleOutputSink: Console output implementation
    - ServiceManager: Single service lifecycle manager
    - ShutdownCoordinator: Reverse-order, run-once shutdown
    - Supervisor: Ordered multi-service coordinator
    - create_control_router: FastAPI endpoint factory

Example:
    >>> from netsup.supervisor import ServiceSpec, Supervisor, TcpPortCheck
    >>> specs = [
    ...     ServiceSpec(name="frr", command=("/usr/lib/frr/frrinit.sh", "start")),
    ...     ServiceSpec(
    ...         name="api",
    ...         command=("uvicorn", "app:app"),
    ...         readiness=TcpPortCheck(port=8000),
    ...     ),
    ... ]
    >>> supervisor = Supervisor(specs)
    >>> report = await supervisor.run()  # Blocks until shutdown
"""

from ._api import create_control_router
from ._backoff import ExponentialBackoff
from ._checks import (
    SYS_DESCR_OID,
    CommandCheck,
    FileCheck,
    LogLineCheck,
    SnmpCheck,
    TcpPortCheck,
)
from ._models import (
    ALLOWED_TRANSITIONS,
    ServiceEvent,
    ServiceEventType,
    ServiceSpec,
    ServiceState,
    ServiceStatus,
)
from ._output import ConsoleOutputSink, NullOutputSink
from ._probe import ProbeResult, probe
from ._protocol import OutputSink, ReadinessCheck
from ._service import ServiceManager
from ._session import Session, validate_specs
from ._shutdown import ShutdownCoordinator
from ._supervisor import RunReport, Supervisor

__all__ = [
    "ALLOWED_TRANSITIONS",
    "SYS_DESCR_OID",
    "CommandCheck",
    "ConsoleOutputSink",
    "ExponentialBackoff",
    "FileCheck",
    "LogLineCheck",
    "NullOutputSink",
    "OutputSink",
    "ProbeResult",
    "ReadinessCheck",
    "RunReport",
    "ServiceEvent",
    "ServiceEventType",
    "ServiceManager",
    "ServiceSpec",
    "ServiceState",
    "ServiceStatus",
    "Session",
    "ShutdownCoordinator",
    "SnmpCheck",
    "Supervisor",
    "TcpPortCheck",
    "create_control_router",
    "probe",
    "validate_specs",
]
