"""Loading and writing configuration on behalf of the CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import tomli_w

from netsup.exceptions import ConfigError

from ._models import Config

if TYPE_CHECKING:
    from pathlib import Path


def safe_load_config(
    *,
    config_path: Path | None = None,
) -> tuple[Config | None, str | None]:
    """Load configuration, turning every failure into a message.

    Commands that need a configuration report the message and exit with
    their own code, so nothing is started.

    Args:
        config_path: File given with --config. Unlike a discovered file it
            must exist.

    Returns:
        `(config, None)` on success, `(None, message)` otherwise.
    """
    if config_path is not None and not config_path.is_file():
        return None, f"Config file not found: {config_path}"

    try:
        return Config.load(config_path), None
    except ConfigError as e:
        return None, str(e)
    except OSError as e:
        return None, f"Cannot read configuration: {e}"


def dump_config(data: dict[str, Any]) -> str:  # pyright: ignore[reportExplicitAny]
    """Render configuration data, such as `Config.to_dict()`, as TOML."""
    return tomli_w.dumps(data)
