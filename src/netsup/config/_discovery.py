"""Configuration file discovery."""

from __future__ import annotations

from pathlib import Path

CONFIG_FILE_NAME = "netsup.toml"
SYSTEM_CONFIG_PATH = Path("/etc/netsup") / CONFIG_FILE_NAME


def find_config_file(start: Path | None = None) -> Path | None:
    """Find the config file to use when none is given explicitly.

    Looks for netsup.toml in the start directory (the current directory by
    default), then for the system-wide /etc/netsup/netsup.toml.

    Args:
        start: Directory to look in first.

    Returns:
        Path to the first config file found, or None.
    """
    directory = start if start is not None else Path.cwd()
    for candidate in (directory / CONFIG_FILE_NAME, SYSTEM_CONFIG_PATH):
        if candidate.is_file():
            return candidate
    return None
