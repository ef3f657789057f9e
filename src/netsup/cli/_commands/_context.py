"""Per-invocation state handed from the meta command to the subcommands."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from netsup.config import Config


_current_cli_context: contextvars.ContextVar[CLIContext | None] = (
    contextvars.ContextVar("cli_context", default=None)
)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global options and the configuration loaded for this invocation.

    Attributes:
        config: The loaded configuration, or None when it could not be loaded.
        config_error: Why loading failed. Each command decides whether that
            is fatal and with which exit code.
        quiet: Do not echo daemon output and events.
        no_color: Plain console output.
        logger: Logger configured from `[logging]` and --verbose.
    """

    config: Config | None = field(default=None, repr=False)
    config_error: str | None = None
    quiet: bool = False
    no_color: bool = False
    logger: FilteringBoundLogger | None = field(default=None, repr=False)

    @classmethod
    def get_current(cls) -> CLIContext:
        """Return the active context.

        Commands invoked without the meta command (as in tests) get a context
        holding the discovered configuration.
        """
        ctx = _current_cli_context.get()
        if ctx is not None:
            return ctx

        from netsup.config import safe_load_config  # noqa: PLC0415

        config, config_error = safe_load_config()
        return cls(config=config, config_error=config_error)

    @classmethod
    def set_current(cls, ctx: CLIContext) -> None:
        _ = _current_cli_context.set(ctx)

    @classmethod
    def reset(cls) -> None:
        _ = _current_cli_context.set(None)
