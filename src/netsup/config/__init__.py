"""netsup configuration.

Configuration is layered: built-in defaults, then netsup.toml (from
--config, the working directory or /etc/netsup), then NETSUP_<SECTION>__<KEY>
environment variables. The result is validated once and immutable.

Example:
    >>> from netsup.config import Config
    >>> config = Config.load()
    >>> [service.name for service in config.services]
    ['frr', 'snmpd']
"""

from netsup.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._defaults import DEFAULT_CONFIG
from ._discovery import CONFIG_FILE_NAME, SYSTEM_CONFIG_PATH, find_config_file
from ._load import dump_config, safe_load_config
from ._loader import (
    ENV_PREFIX,
    deep_merge,
    parse_env_value,
    parse_env_vars,
    read_toml_file,
)
from ._models import (
    CommandReadinessConfiguration,
    Config,
    FileReadinessConfiguration,
    LogFormat,
    LoggingConfig,
    LogLevel,
    LogReadinessConfiguration,
    ReadinessConfiguration,
    ServiceConfiguration,
    SnmpReadinessConfiguration,
    SupervisorConfiguration,
    TcpReadinessConfiguration,
)
from ._validation import (
    ValidationIssue,
    raise_if_validation_errors,
    validate_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "SYSTEM_CONFIG_PATH",
    "CommandReadinessConfiguration",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
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
    "ValidationIssue",
    "deep_merge",
    "dump_config",
    "find_config_file",
    "parse_env_value",
    "parse_env_vars",
    "raise_if_validation_errors",
    "read_toml_file",
    "safe_load_config",
    "validate_config",
]
