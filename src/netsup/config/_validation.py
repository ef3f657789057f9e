# pyright: reportAny=false, reportExplicitAny=false, reportUnknownArgumentType=false
"""Checking a merged configuration against the `Config` schema."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from netsup.config._models import Config
from netsup.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

# pydantic prefixes messages raised from our own validators
_VALUE_ERROR_PREFIX = "Value error, "


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """One problem found in a configuration.

    Attributes:
        key: Dotted path of the offending key, list indexes included
            ("services.1.stop_signal"). Empty for the document itself.
        message: What is wrong.
        expected: The accepted values or pattern, when pydantic names them.
        actual: The rejected value.
    """

    key: str
    message: str
    expected: str | None
    actual: Any

    @classmethod
    def from_error(cls, error: ErrorDetails) -> ValidationIssue:
        context = error.get("ctx") or {}
        if "expected" in context:
            expected = str(context["expected"])
        elif "pattern" in context:
            expected = f"pattern: {context['pattern']}"
        else:
            expected = None

        return cls(
            key=".".join(map(str, error["loc"])),
            message=error["msg"].removeprefix(_VALUE_ERROR_PREFIX),
            expected=expected,
            actual=error.get("input"),
        )


def validate_config(config: dict[str, Any]) -> list[ValidationIssue]:
    """Return every issue in `config`; an empty list means it is valid."""
    try:
        _ = Config.model_validate(config)
    except ValidationError as e:
        return [ValidationIssue.from_error(error) for error in e.errors()]
    return []


def raise_if_validation_errors(issues: list[ValidationIssue]) -> None:
    """Raise ConfigValidationError describing the first of `issues`.

    Raises:
        ConfigValidationError: If there is at least one issue.
    """
    if not issues:
        return

    first = issues[0]
    msg = f"Invalid configuration value for '{first.key}': {first.message}"
    raise ConfigValidationError(
        msg,
        key=first.key,
        value=first.actual,
        expected=first.expected or first.message,
    )
