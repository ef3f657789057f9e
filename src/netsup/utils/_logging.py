"""structlog loggers for the supervisor and the CLI.

The logger writes to stderr or to the `[logging] file` so that it never
interleaves with daemon output on stdout. Loggers are wrapped
individually; the global structlog configuration is left alone.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TextIO, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger, Processor

LogFormatType = Literal["json", "text"]

_LEVELS = logging.getLevelNamesMapping()

# Append handles by resolved path, shared by every logger writing there
_append_files: dict[Path, TextIO] = {}


def _resolve_level(level: str | None) -> int:
    """Pick the effective level.

    NETSUP_DEBUG forces DEBUG. Otherwise `level`, then NETSUP_LOG_LEVEL,
    then INFO. Unknown names mean INFO.
    """
    if getenv("NETSUP_DEBUG"):
        return logging.DEBUG
    name = level or getenv("NETSUP_LOG_LEVEL") or "info"
    return _LEVELS.get(name.upper(), logging.INFO)


def _open_destination(
    log_file: Path | None,
    level: int,
    *,
    max_bytes: int | None,
    backup_count: int | None,
) -> object:
    if log_file is None:
        return structlog.PrintLogger(file=sys.stderr)

    log_file.parent.mkdir(parents=True, exist_ok=True)
    resolved = log_file.resolve()
    if max_bytes is None or backup_count is None:
        handle = _append_files.get(resolved)
        if handle is None or handle.closed:
            handle = _append_files[resolved] = resolved.open("a")
        return structlog.WriteLoggerFactory(file=handle)()

    # One stdlib logger per file, so repeated calls never stack handlers
    rotating = logging.getLogger(f"netsup.file.{resolved}")
    for old in rotating.handlers[:]:
        rotating.removeHandler(old)
        old.close()
    rotating.propagate = False
    rotating.setLevel(level)
    handler = RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    rotating.addHandler(handler)
    return rotating


def _processors(log_format: LogFormatType) -> list[Processor]:
    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if log_format == "json":
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def create_supervisor_logger(
    *,
    level: str | None = None,
    log_format: LogFormatType = "text",
    log_file: str = "",
    max_bytes: int | None = None,
    backup_count: int | None = None,
) -> FilteringBoundLogger:
    """Create the logger shared by the supervisor and the CLI.

    Args:
        level: Level name such as "debug" or "warning". NETSUP_DEBUG
            overrides it; NETSUP_LOG_LEVEL is used when it is None.
        log_format: "text" for `timestamp [level] event key=value` lines,
            "json" for one object per line.
        log_file: File to append to. Empty means stderr.
        max_bytes: Rotate the file at this size. Only takes effect
            together with `backup_count`.
        backup_count: Rotated files to keep.
    """
    effective_level = _resolve_level(level)
    destination = _open_destination(
        Path(log_file) if log_file else None,
        effective_level,
        max_bytes=max_bytes,
        backup_count=backup_count,
    )
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            destination,
            processors=_processors(log_format),
            wrapper_class=structlog.make_filtering_bound_logger(effective_level),
            context_class=dict,
        ),
    )
