# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing
"""Validate command for netsup configuration."""

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from netsup.config import (
    DEFAULT_CONFIG,
    ValidationIssue,
    deep_merge,
    find_config_file,
    read_toml_file,
    validate_config,
)
from netsup.exceptions import ConfigLoadError

from ._app import app
from ._exit_codes import EXIT_LOAD_ERROR, EXIT_SUCCESS, EXIT_VALIDATION_ERROR


def _format_issue(issue: ValidationIssue) -> str:
    line = f"  {issue.key or '<root>'}: {issue.message}"
    if issue.expected and issue.expected != issue.message:
        line = f"{line} (expected {issue.expected})"
    return line


@app.command(name="validate")
def _validate(
    path: Annotated[
        Path | None,
        Parameter(help="Config file to validate (default: the discovered one)"),
    ] = None,
) -> None:
    """Validate a configuration file

    Reports every validation issue, not just the first one.

    Args:
        path: Config file to validate.
    """
    target = path if path is not None else find_config_file()
    if target is None:
        print("Error: No config file found")  # noqa: T201
        raise SystemExit(EXIT_LOAD_ERROR)

    try:
        data = read_toml_file(target)
    except FileNotFoundError:
        print(f"Error: Config file not found: {target}")  # noqa: T201
        raise SystemExit(EXIT_LOAD_ERROR) from None
    except ConfigLoadError as e:
        print(f"Error: {e}")  # noqa: T201
        raise SystemExit(EXIT_LOAD_ERROR) from None

    issues = validate_config(deep_merge(DEFAULT_CONFIG, data))
    if issues:
        print(f"{target}: {len(issues)} error(s)")  # noqa: T201
        for issue in issues:
            print(_format_issue(issue))  # noqa: T201
        raise SystemExit(EXIT_VALIDATION_ERROR)

    print(f"{target}: OK")  # noqa: T201
    raise SystemExit(EXIT_SUCCESS)
