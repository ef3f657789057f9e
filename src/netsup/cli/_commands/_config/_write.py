# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing
"""Init command that writes a starter configuration file."""

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from netsup.config import CONFIG_FILE_NAME, DEFAULT_CONFIG, dump_config

from ._app import app
from ._exit_codes import EXIT_FILE_EXISTS, EXIT_LOAD_ERROR, EXIT_SUCCESS


@app.command(name="init")
def _init(
    *,
    output: Annotated[
        Path | None,
        Parameter(name=["--output", "-o"], help="Where to write the file"),
    ] = None,
    force: Annotated[
        bool,
        Parameter(name="--force", help="Overwrite an existing file"),
    ] = False,
) -> None:
    """Write the built-in FRR + snmpd profile as a config file

    Args:
        output: Destination path (default: ./netsup.toml).
        force: Overwrite the file if it already exists.
    """
    target = output if output is not None else Path.cwd() / CONFIG_FILE_NAME
    if target.exists() and not force:
        print(f"Error: {target} already exists (use --force to overwrite)")  # noqa: T201
        raise SystemExit(EXIT_FILE_EXISTS)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        _ = target.write_text(dump_config(DEFAULT_CONFIG))
    except OSError as e:
        print(f"Error: Cannot write {target}: {e}")  # noqa: T201
        raise SystemExit(EXIT_LOAD_ERROR) from None

    print(f"Wrote {target}")  # noqa: T201
    raise SystemExit(EXIT_SUCCESS)
