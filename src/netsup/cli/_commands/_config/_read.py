# ruff: noqa: A002
"""Read commands for viewing netsup configuration."""

from enum import StrEnum
from typing import Annotated

from cyclopts import Parameter
from rich.console import Console
from rich.table import Table

from netsup.cli._commands._context import CLIContext
from netsup.cli._commands._shared import format_json
from netsup.config import Config, ServiceConfiguration, dump_config

from ._app import app
from ._exit_codes import EXIT_LOAD_ERROR, EXIT_SUCCESS


class OutputFormat(StrEnum):
    """Supported output formats for `config show`."""

    TOML = "toml"
    JSON = "json"


def _require_config() -> Config:
    ctx = CLIContext.get_current()
    if ctx.config is None:
        print(f"Error: {ctx.config_error}")  # noqa: T201
        raise SystemExit(EXIT_LOAD_ERROR)
    return ctx.config


def _describe_readiness(service: ServiceConfiguration) -> str:
    if service.readiness is None:
        return "-"
    return service.readiness.to_check().describe()


@app.command(name="show")
def _show(
    *,
    format: Annotated[
        OutputFormat,
        Parameter(name=["--format", "-f"], help="Output format (toml, json)"),
    ] = OutputFormat.TOML,
) -> None:
    """Display the merged configuration

    Shows the configuration the run command would use: built-in defaults,
    overridden by the config file, overridden by NETSUP_* variables.

    Args:
        format: Output format (toml, json).
    """
    data = _require_config().to_dict()

    match format:
        case OutputFormat.JSON:
            output = format_json(data)
        case _:
            output = dump_config(data)

    print(output.rstrip())  # noqa: T201
    raise SystemExit(EXIT_SUCCESS)


@app.command(name="services")
def _services() -> None:
    """List the configured services in start order"""
    config = _require_config()
    ctx = CLIContext.get_current()

    table = Table(title="Services (start order)")
    table.add_column("#", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Command")
    table.add_column("Readiness")
    table.add_column("Requires")
    table.add_column("Timeout", justify="right")

    for index, service in enumerate(config.services, start=1):
        table.add_row(
            str(index),
            service.name,
            " ".join(service.command),
            _describe_readiness(service),
            ", ".join(service.requires) or "-",
            f"{service.startup_timeout:g}s",
        )

    Console(no_color=ctx.no_color).print(table)
    raise SystemExit(EXIT_SUCCESS)
