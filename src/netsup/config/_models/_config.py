# pyright: reportExplicitAny=false, reportAny=false
"""The validated, immutable configuration of one netsup run.

Sources are merged in precedence order: built-in defaults, then the TOML
file, then NETSUP_* environment variables.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from netsup.config._defaults import DEFAULT_CONFIG
from netsup.config._loader import deep_merge, parse_env_vars, read_toml_file
from netsup.config._models._logging import LoggingConfig
from netsup.config._models._services import ServiceConfiguration
from netsup.config._models._supervisor import SupervisorConfiguration

if TYPE_CHECKING:
    from typing import Self

    from netsup.supervisor import ServiceSpec


class Config(BaseModel):
    """Everything netsup needs to know before starting a service.

    Immutable once loaded. Use the factory methods rather than the
    constructor so that defaults are merged in and errors are reported as
    ConfigValidationError.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    logging: LoggingConfig = LoggingConfig()
    supervisor: SupervisorConfiguration = SupervisorConfiguration()
    services: tuple[ServiceConfiguration, ...] = Field(min_length=1)

    _source: Path | None = PrivateAttr(default=None)

    @field_validator("services")
    @classmethod
    def _check_start_order(
        cls, services: tuple[ServiceConfiguration, ...]
    ) -> tuple[ServiceConfiguration, ...]:
        seen: set[str] = set()
        for service in services:
            if service.name in seen:
                msg = f"duplicate service name {service.name!r}"
                raise ValueError(msg)
            for dependency in service.requires:
                if dependency not in seen:
                    msg = (
                        f"service {service.name!r} requires {dependency!r}, "
                        "which must be listed before it"
                    )
                    raise ValueError(msg)
            seen.add(service.name)
        return services

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create configuration from a dictionary merged over the defaults.

        Args:
            data: Dictionary of configuration values.

        Returns:
            Validated configuration object.

        Raises:
            ConfigValidationError: If validation fails.
        """
        # Deferred import to avoid circular dependency
        from netsup.config._validation import (  # noqa: PLC0415
            raise_if_validation_errors,
            validate_config,
        )

        merged = deep_merge(DEFAULT_CONFIG, data)
        raise_if_validation_errors(validate_config(merged))
        return cls.model_validate(merged)

    @classmethod
    def from_file(cls, path: Path, *, include_env: bool = False) -> Self:
        """Load configuration from a specific file.

        Args:
            path: Path to the TOML config file.
            include_env: Apply NETSUP_* environment overrides on top.

        Returns:
            Configuration object from the file merged over the defaults.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        data = read_toml_file(path)
        if include_env:
            data = deep_merge(data, parse_env_vars())

        config = cls.from_dict(data)
        config._source = path
        return config

    @classmethod
    def load(cls, config_path: Path | None = None, *, include_env: bool = True) -> Self:
        """Load merged configuration from all sources.

        Uses `config_path` when given, otherwise the first config file found
        by discovery, otherwise the built-in defaults alone.

        Args:
            config_path: Explicit path to a config file.
            include_env: Apply NETSUP_* environment overrides on top.

        Returns:
            Merged configuration object.

        Raises:
            FileNotFoundError: If an explicit config file does not exist.
            ConfigLoadError: If the config file cannot be parsed.
            ConfigValidationError: If the merged config fails validation.
        """
        from netsup.config._discovery import find_config_file  # noqa: PLC0415

        path = config_path if config_path is not None else find_config_file()
        if path is not None:
            return cls.from_file(path, include_env=include_env)

        return cls.from_dict(parse_env_vars() if include_env else {})

    @property
    def source(self) -> Path | None:
        """Return the config file this configuration was read from."""
        return self._source

    def get_service(self, name: str) -> ServiceConfiguration | None:
        """Return the configuration of the named service, if any."""
        for service in self.services:
            if service.name == name:
                return service
        return None

    def to_specs(self) -> list[ServiceSpec]:
        """Build the ordered ServiceSpecs for the supervisor."""
        return [service.to_spec() for service in self.services]

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as TOML-serializable data."""
        return self.model_dump(mode="json", exclude_none=True)
