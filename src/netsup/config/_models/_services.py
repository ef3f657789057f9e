"""Service configuration model.

This module provides the ServiceConfiguration Pydantic model, one entry of
the ordered `[[services]]` array, and its conversion to a ServiceSpec.
"""

import signal
from pathlib import Path  # noqa: TC003
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from netsup.config._models._readiness import (
    ReadinessConfiguration,  # noqa: TC001
)
from netsup.supervisor import ServiceSpec


class ServiceConfiguration(BaseModel):
    """Configuration of one supervised service.

    Field meanings match ServiceSpec. `stop_signal` is a signal name such
    as "SIGTERM" or "INT".
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1, pattern=r"^[A-Za-z0-9_.-]+$")
    command: tuple[str, ...] = Field(min_length=1)
    readiness: ReadinessConfiguration | None = None
    startup_timeout: float = Field(default=10.0, gt=0)
    probe_interval: float = Field(default=0.5, gt=0)
    probe_backoff: float = Field(default=1.0, ge=1.0)
    probe_max_interval: float = Field(default=5.0, gt=0)
    stop_command: tuple[str, ...] | None = None
    stop_signal: str = "SIGTERM"
    shutdown_timeout: float = Field(default=5.0, gt=0)
    requires: tuple[str, ...] = ()
    daemonizes: bool = False
    required_files: tuple[Path, ...] = ()
    cwd: Path | None = None
    env: dict[str, str] = Field(default_factory=dict)

    @field_validator("stop_command")
    @classmethod
    def _check_stop_command(
        cls, value: tuple[str, ...] | None
    ) -> tuple[str, ...] | None:
        if value is not None and not value:
            msg = "stop_command must not be empty"
            raise ValueError(msg)
        return value

    @field_validator("stop_signal")
    @classmethod
    def _normalize_signal(cls, value: str) -> str:
        name = value.upper()
        if not name.startswith("SIG"):
            name = f"SIG{name}"
        if name not in signal.Signals.__members__:
            msg = f"unknown signal {value!r}"
            raise ValueError(msg)
        return name

    def to_spec(self) -> ServiceSpec:
        """Build the immutable ServiceSpec the supervisor runs."""
        return ServiceSpec(
            name=self.name,
            command=self.command,
            readiness=self.readiness.to_check() if self.readiness else None,
            startup_timeout=self.startup_timeout,
            probe_interval=self.probe_interval,
            probe_backoff=self.probe_backoff,
            probe_max_interval=self.probe_max_interval,
            stop_command=self.stop_command,
            stop_signal=signal.Signals[self.stop_signal],
            shutdown_timeout=self.shutdown_timeout,
            requires=self.requires,
            daemonizes=self.daemonizes,
            required_files=self.required_files,
            cwd=self.cwd,
            env=dict(self.env),
        )
