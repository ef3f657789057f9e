"""Supervisor session.

A session ties the ordered service specs to their managers and records
which services reached Ready, in the order they did.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, final

from netsup.exceptions import InvalidServiceSpecError, ServiceNotFoundError

from ._models import ServiceState

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from ._models import ServiceSpec
    from ._service import ServiceManager


def validate_specs(specs: Sequence[ServiceSpec]) -> None:
    """Check that specs can be started in the given order.

    Args:
        specs: Service specs in start order.

    Raises:
        InvalidServiceSpecError: If names repeat, a command is empty, or a
            service requires a service that is not started before it.
    """
    seen: set[str] = set()
    for spec in specs:
        if not spec.name:
            msg = "Service name must not be empty"
            raise InvalidServiceSpecError(msg)
        if spec.name in seen:
            msg = f"Duplicate service name '{spec.name}'"
            raise InvalidServiceSpecError(msg, service_name=spec.name)
        if not spec.command:
            msg = f"Service '{spec.name}' has an empty command"
            raise InvalidServiceSpecError(msg, service_name=spec.name)
        for dependency in spec.requires:
            if dependency not in seen:
                msg = (
                    f"Service '{spec.name}' requires '{dependency}', "
                    "which is not started before it"
                )
                raise InvalidServiceSpecError(msg, service_name=spec.name)
        seen.add(spec.name)


@final
class Session:
    """Ordered services of one supervisor run.

    Attributes:
        services: Service managers in start order.
    """

    __slots__ = ("_by_name", "_started", "services")

    def __init__(self, services: Sequence[ServiceManager]) -> None:
        self.services: tuple[ServiceManager, ...] = tuple(services)
        self._by_name: dict[str, ServiceManager] = {s.name: s for s in self.services}
        self._started: list[ServiceManager] = []

    def __iter__(self) -> Iterator[ServiceManager]:
        return iter(self.services)

    def __len__(self) -> int:
        return len(self.services)

    def get(self, name: str) -> ServiceManager:
        """Get a service by name.

        Raises:
            ServiceNotFoundError: If no service exists with that name.
        """
        service = self._by_name.get(name)
        if service is None:
            msg = f"Service '{name}' not found"
            raise ServiceNotFoundError(msg, service_name=name)
        return service

    def mark_ready(self, service: ServiceManager) -> None:
        """Record that a service reached Ready."""
        self._started.append(service)

    @property
    def started(self) -> tuple[ServiceManager, ...]:
        """Return the services that reached Ready, in start order."""
        return tuple(self._started)

    def unmet_dependencies(self, service: ServiceManager) -> list[str]:
        """Return the names of required services that are not Ready."""
        return [
            name
            for name in service.spec.requires
            if self.get(name).state != ServiceState.READY
        ]

    def states(self) -> dict[str, ServiceState]:
        """Return the current state of every service, in start order."""
        return {service.name: service.state for service in self.services}
