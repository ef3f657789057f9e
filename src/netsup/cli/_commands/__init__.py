"""netsup CLI commands."""
# pyright: reportUnusedCallResult=false

from __future__ import annotations

from typing import TYPE_CHECKING

from ._config import app as config_app
from ._context import CLIContext
from ._probe import app as probe_app
from ._run import app as run_app
from ._shared import ExitCode, exit_with_error, format_json

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "CLIContext",
    "ExitCode",
    "config_app",
    "exit_with_error",
    "format_json",
    "probe_app",
    "run_app",
]


def register_commands(app: App) -> None:
    app.command(config_app)
    app.command(probe_app)
    app.command(run_app)
