"""Exit codes and output helpers shared by the netsup commands."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Never

import orjson
from rich.console import Console

__all__ = [
    "ExitCode",
    "exit_with_error",
    "format_json",
]


class ExitCode(IntEnum):
    """Exit status of `netsup run`.

    `config` and `probe` keep their own small tables, see their
    `_exit_codes` modules.
    """

    SUCCESS = 0
    # Nothing was started
    CONFIG_ERROR = 1
    STARTUP_FAILURE = 2
    SHUTDOWN_FAILURE = 3
    # A ready service died without being asked to
    SERVICE_EXITED = 4


def format_json(data: dict[str, Any]) -> str:  # pyright: ignore[reportExplicitAny]
    """Render `data` as indented JSON."""
    return orjson.dumps(data, option=orjson.OPT_INDENT_2).decode()


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.CONFIG_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Report `message` on stderr and leave with `code`.

    Raises:
        SystemExit: Always.
    """
    (console or Console(stderr=True)).print(f"[red]Error:[/red] {message}")
    raise SystemExit(code)
