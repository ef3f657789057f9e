"""Pydantic models for netsup configuration."""

from ._common import LogFormat, LogLevel
from ._config import Config
from ._logging import LoggingConfig
from ._readiness import (
    CommandReadinessConfiguration,
    FileReadinessConfiguration,
    LogReadinessConfiguration,
    ReadinessConfiguration,
    SnmpReadinessConfiguration,
    TcpReadinessConfiguration,
)
from ._services import ServiceConfiguration
from ._supervisor import SupervisorConfiguration

__all__ = [
    "CommandReadinessConfiguration",
    "Config",
    "FileReadinessConfiguration",
    "LogFormat",
    "LogLevel",
    "LogReadinessConfiguration",
    "LoggingConfig",
    "ReadinessConfiguration",
    "ServiceConfiguration",
    "SnmpReadinessConfiguration",
    "SupervisorConfiguration",
    "TcpReadinessConfiguration",
]
