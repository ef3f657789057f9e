# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Reading netsup.toml and layering configuration sources.

Sources are plain dictionaries until the final merge is validated: the
built-in profile, the TOML file, then `NETSUP_<SECTION>__<KEY>` variables.
"""

from __future__ import annotations

import copy
import os
import tomllib
from typing import TYPE_CHECKING, Any

from netsup.exceptions import ConfigLoadError

if TYPE_CHECKING:
    from pathlib import Path

ENV_PREFIX = "NETSUP_"

# NETSUP_SUPERVISOR__CONTROL_PORT -> supervisor.control_port
_NESTING = "__"

_ENV_VALUE_TYPES = (bool, int, float, str, list, dict)


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a netsup TOML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file is not valid TOML.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Cannot parse {path}: {e}"
        # lineno/colno are only set by newer tomllib releases
        raise ConfigLoadError(
            msg,
            path=path,
            line=getattr(e, "lineno", None),
            column=getattr(e, "colno", None),
        ) from e


def deep_merge(
    base: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    override: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Layer `override` on top of `base`, returning a new dictionary.

    Tables are merged key by key. Anything else, arrays included, is
    replaced by the override: a file's `[[services]]` replace the built-in
    profile rather than extending it. Neither input is modified.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def parse_env_vars(
    prefix: str = ENV_PREFIX,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Collect `<prefix><SECTION>__<KEY>` variables into nested tables.

    Variables without a section, such as NETSUP_DEBUG or NETSUP_LOG_LEVEL,
    configure the logger directly and are skipped here.

    Args:
        prefix: Environment variable prefix.

    Returns:
        Nested dictionary of overrides, e.g. `{"supervisor": {"control_port": 9000}}`.
    """
    overrides: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for name, raw in os.environ.items():
        if not name.startswith(prefix):
            continue

        path = name[len(prefix) :].lower().split(_NESTING)
        if len(path) < 2 or not all(path):  # noqa: PLR2004
            continue

        table = overrides
        for part in path[:-1]:
            child = table.get(part)
            if not isinstance(child, dict):
                child = table[part] = {}
            table = child
        table[path[-1]] = parse_env_value(raw)

    return overrides


def parse_env_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Interpret an environment variable value.

    `true` and `false` are booleans in any letter case. Otherwise the value
    is read as a TOML value, so numbers, arrays (`["a", "b"]`) and inline
    tables (`{ port = 161 }`) keep their type. Anything TOML rejects, such
    as `127.0.0.1` or `debug`, stays a string and needs no quoting.
    """
    if value.lower() in ("true", "false"):
        return value.lower() == "true"

    try:
        document = tomllib.loads(f"value = {value}")
    except tomllib.TOMLDecodeError:
        return value

    parsed = document.get("value")
    if len(document) != 1 or not isinstance(parsed, _ENV_VALUE_TYPES):
        return value
    return parsed
