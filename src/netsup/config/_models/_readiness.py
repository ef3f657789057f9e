"""Readiness check configuration models.

Each model is one variant of a discriminated union keyed on `type` and
builds the matching ReadinessCheck from netsup.supervisor.
"""

from pathlib import Path  # noqa: TC003
from typing import Annotated, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from netsup.supervisor import (
    SYS_DESCR_OID,
    CommandCheck,
    FileCheck,
    LogLineCheck,
    SnmpCheck,
    TcpPortCheck,
)


class TcpReadinessConfiguration(BaseModel):
    """Ready when a TCP port accepts connections."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    type: Literal["tcp"] = "tcp"
    port: int = Field(ge=1, le=65535)
    host: str = "127.0.0.1"
    connect_timeout: float = Field(default=1.0, gt=0)

    def to_check(self) -> TcpPortCheck:
        return TcpPortCheck(
            port=self.port,
            host=self.host,
            connect_timeout=self.connect_timeout,
        )


class SnmpReadinessConfiguration(BaseModel):
    """Ready when an SNMP agent answers a GET for an OID."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    type: Literal["snmp"] = "snmp"
    host: str = "127.0.0.1"
    port: int = Field(default=161, ge=1, le=65535)
    community: str = "public"
    oid: str = Field(default=SYS_DESCR_OID, pattern=r"^\d+(\.\d+)+$")
    request_timeout: float = Field(default=1.0, gt=0)

    def to_check(self) -> SnmpCheck:
        return SnmpCheck(
            host=self.host,
            port=self.port,
            community=self.community,
            oid=self.oid,
            request_timeout=self.request_timeout,
        )


class CommandReadinessConfiguration(BaseModel):
    """Ready when a probe command exits 0."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    type: Literal["command"] = "command"
    command: tuple[str, ...] = Field(min_length=1)

    def to_check(self) -> CommandCheck:
        return CommandCheck(command=self.command)


class FileReadinessConfiguration(BaseModel):
    """Ready when a path exists."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    type: Literal["file"] = "file"
    path: Path

    def to_check(self) -> FileCheck:
        return FileCheck(path=self.path)


class LogReadinessConfiguration(BaseModel):
    """Ready when a line of a log file matches a regular expression."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    type: Literal["log"] = "log"
    path: Path
    pattern: str = Field(min_length=1)

    @field_validator("pattern")
    @classmethod
    def _compile_pattern(cls, value: str) -> str:
        import re  # noqa: PLC0415

        try:
            _ = re.compile(value)
        except re.error as e:
            msg = f"invalid regular expression: {e}"
            raise ValueError(msg) from e
        return value

    def to_check(self) -> LogLineCheck:
        return LogLineCheck(path=self.path, pattern=self.pattern)


ReadinessConfiguration = Annotated[
    TcpReadinessConfiguration
    | SnmpReadinessConfiguration
    | CommandReadinessConfiguration
    | FileReadinessConfiguration
    | LogReadinessConfiguration,
    Field(discriminator="type"),
]
