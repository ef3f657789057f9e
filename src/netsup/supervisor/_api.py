"""HTTP control surface for a running supervisor.

Read-only status endpoints plus a shutdown trigger. Nothing here changes a
service's state directly: POST /supervisor/shutdown only raises the same
request a SIGTERM would.
"""

# pyright: reportUnusedFunction=false
# FastAPI route handlers are registered via decorators, not direct calls

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict

from netsup.exceptions import ServiceNotFoundError

from ._models import ServiceState

if TYPE_CHECKING:
    from ._service import ServiceManager
    from ._supervisor import Supervisor


class ServiceStatusResponse(BaseModel):
    """One service as seen through the control API."""

    model_config = ConfigDict(frozen=True)

    name: str
    state: ServiceState
    pid: int | None
    probe_attempts: int
    last_exit_code: int | None
    started_at: str | None
    ready_at: str | None
    stopped_at: str | None
    error: str | None

    @classmethod
    def from_service(cls, service: ServiceManager) -> ServiceStatusResponse:
        current = service.status
        return cls(
            name=service.name,
            state=current.state,
            pid=current.pid,
            probe_attempts=current.probe_attempts,
            last_exit_code=current.last_exit_code,
            started_at=current.started_at,
            ready_at=current.ready_at,
            stopped_at=current.stopped_at,
            error=current.error,
        )


class SupervisorStatusResponse(BaseModel):
    """All services in start order, with summary counts."""

    model_config = ConfigDict(frozen=True)

    services: dict[str, ServiceStatusResponse]
    total_services: int
    ready_services: int
    shutdown_requested: bool


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


def create_control_router(supervisor: Supervisor) -> APIRouter:
    """Build the `/supervisor` router for one supervisor instance."""
    router = APIRouter(prefix="/supervisor", tags=["supervisor"])

    def snapshot() -> list[ServiceStatusResponse]:
        return [ServiceStatusResponse.from_service(s) for s in supervisor.session]

    @router.get("/status", response_model=SupervisorStatusResponse)
    async def get_supervisor_status() -> SupervisorStatusResponse:
        services = snapshot()
        return SupervisorStatusResponse(
            services={s.name: s for s in services},
            total_services=len(services),
            ready_services=sum(s.state is ServiceState.READY for s in services),
            shutdown_requested=supervisor.shutdown_requested,
        )

    @router.get("/services", response_model=list[ServiceStatusResponse])
    async def list_services() -> list[ServiceStatusResponse]:
        return snapshot()

    @router.get("/services/{name}", response_model=ServiceStatusResponse)
    async def get_service_status(name: str) -> ServiceStatusResponse:
        try:
            service = supervisor.get_service(name)
        except ServiceNotFoundError as e:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Service '{name}' not found",
            ) from e
        return ServiceStatusResponse.from_service(service)

    @router.post("/shutdown", response_model=MessageResponse)
    async def shutdown_supervisor() -> MessageResponse:
        supervisor.request_shutdown()
        return MessageResponse(message="Shutdown initiated")

    return router
