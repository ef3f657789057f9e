"""Supervisor configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class SupervisorConfiguration(BaseModel):
    """Supervisor configuration section.

    Attributes:
        control_host: Interface the HTTP control API binds to.
        control_port: Port of the HTTP control API. 0 disables it.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    control_host: str = "127.0.0.1"
    control_port: int = Field(default=0, ge=0, le=65535)
