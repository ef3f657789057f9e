"""netsup exceptions.

Configuration errors stop netsup before anything is started. Supervisor
errors are attributable to a named service wherever one is involved.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path


class NetsupError(Exception):
    """Base exception for netsup errors."""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(NetsupError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when a config file cannot be read or is not valid TOML.

    Attributes:
        path: The offending file, if known.
        line: 1-based line of the parse error, if known.
        column: 1-based column of the parse error, if known.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when a merged configuration does not match the schema.

    Attributes:
        key: Dotted path of the first offending key, e.g. "services.1.command".
        value: The rejected value.
        expected: What the key should hold.
    """

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
    ) -> None:
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected


# =============================================================================
# Supervisor Exceptions
# =============================================================================


class SupervisorError(NetsupError):
    """Base exception for supervisor errors."""


class InvalidServiceSpecError(SupervisorError, ValueError):
    """Raised when a sequence of service specs cannot form a session.

    Attributes:
        service_name: The service whose spec is invalid, when it has a name.
    """

    def __init__(self, message: str, *, service_name: str | None = None) -> None:
        super().__init__(message)
        self.service_name: str | None = service_name


class ServiceError(SupervisorError):
    """An error about one named service.

    Attributes:
        service_name: The service the error is about.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        service_name: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.service_name: str = service_name
        self.cause: Exception | None = cause


class ServiceNotFoundError(ServiceError, KeyError):
    """Raised when no service has the requested name."""


class InvalidTransitionError(ServiceError):
    """Raised when a service is asked to make an illegal state transition.

    Attributes:
        current: The state the service is in.
        target: The state that was requested.
    """

    def __init__(
        self,
        message: str,
        *,
        service_name: str,
        current: str,
        target: str,
    ) -> None:
        super().__init__(message, service_name=service_name)
        self.current: str = current
        self.target: str = target


class StartupError(ServiceError):
    """Raised when a service cannot be spawned or does not become ready."""


class ServiceStopError(ServiceError):
    """Raised when a service's stop command fails or its process cannot be stopped."""


class ProbeError(SupervisorError):
    """Raised when a readiness check itself is broken.

    Distinct from a service that is simply not ready yet: a probe error
    means polling again cannot succeed (unresolvable host, missing probe
    command, unreadable log file, an agent rejecting the request).

    Attributes:
        target: Description of what was being probed.
        service_name: The service being probed, once known.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        target: str,
        service_name: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.target: str = target
        self.service_name: str | None = service_name
        self.cause: Exception | None = cause


class ShutdownError(SupervisorError):
    """Raised when one or more services failed to stop during shutdown.

    Attributes:
        failures: The individual stop failures, in the order services were
            stopped.
    """

    def __init__(self, failures: tuple[ServiceStopError, ...]) -> None:
        names = ", ".join(failure.service_name for failure in failures)
        super().__init__(f"Failed to stop {len(failures)} service(s): {names}")
        self.failures: tuple[ServiceStopError, ...] = failures

    @property
    def service_names(self) -> tuple[str, ...]:
        """Return the names of the services that failed to stop."""
        return tuple(failure.service_name for failure in self.failures)
