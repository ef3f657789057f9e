"""The command-line interface for netsup."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import TYPE_CHECKING, Annotated, cast

from cyclopts import App, Parameter
from rich.console import Console

from netsup.config import Config, safe_load_config
from netsup.utils import LogFormatType, create_supervisor_logger

from ._commands import register_commands
from ._commands._context import CLIContext

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

APP_HELP = "Start network services in order and supervise them."


def _logger_for(config: Config | None, *, verbose: bool) -> "FilteringBoundLogger":
    """Build the logger from `[logging]`; --verbose raises it to debug.

    Without a usable configuration the logger goes to stderr at the level
    the environment asks for.
    """
    level = "debug" if verbose else None
    if config is None:
        return create_supervisor_logger(level=level)

    settings = config.logging
    return create_supervisor_logger(
        level=level or settings.level.value,
        log_format=cast("LogFormatType", settings.format.value),
        log_file=settings.file,
        max_bytes=settings.max_bytes,
        backup_count=settings.backup_count,
    )


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    app = App(
        name="netsup",
        help=APP_HELP,
        help_on_error=True,
        console=console or Console(),
        error_console=error_console or Console(stderr=True),
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        verbose: Annotated[bool, Parameter(help="Enable debug logging")] = False,
        quiet: Annotated[bool, Parameter(help="Suppress service output")] = False,
        no_color: Annotated[
            bool, Parameter(name="--no-color", help="Disable colored output")
        ] = False,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
    ) -> None:
        """Load configuration once, then dispatch to a subcommand.

        Args:
            tokens: Subcommand and its arguments.
            verbose: Log at debug level regardless of `[logging] level`.
            quiet: Do not echo daemon output and events.
            no_color: Plain console output.
            config: Use this file instead of discovering netsup.toml.
        """
        loaded, error = safe_load_config(config_path=config)
        CLIContext.set_current(
            CLIContext(
                config=loaded,
                config_error=error,
                quiet=quiet,
                no_color=no_color,
                logger=_logger_for(loaded, verbose=verbose),
            )
        )
        try:
            app(tokens)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


def main() -> None:
    """Entry point of the `netsup` console script."""
    create_app().meta()


if __name__ == "__main__":
    main()
