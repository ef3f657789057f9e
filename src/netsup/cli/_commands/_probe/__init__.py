"""netsup probe command - runs one service's readiness check."""

from typing import Annotated

import anyio
from cyclopts import App, Parameter

from netsup.cli._commands._context import CLIContext
from netsup.exceptions import ProbeError
from netsup.supervisor import ProbeResult, probe

from ._exit_codes import (
    EXIT_NOT_READY,
    EXIT_PROBE_ERROR,
    EXIT_READY,
    EXIT_UNKNOWN_SERVICE,
)

app = App(
    name="probe",
    help="Check whether a configured service is ready",
    help_on_error=True,
)


@app.default
def probe_service(
    name: Annotated[str, Parameter(help="Name of the configured service.")],
    /,
    *,
    timeout: Annotated[
        float | None,
        Parameter(help="Seconds to keep polling (default: the startup timeout)."),
    ] = None,
) -> None:
    """Poll a service's readiness check without starting anything.

    Useful to debug a readiness check against a service started by hand.
    """
    ctx = CLIContext.get_current()
    if ctx.config is None:
        print(f"Error: Cannot load configuration: {ctx.config_error}")  # noqa: T201
        raise SystemExit(EXIT_UNKNOWN_SERVICE)

    service = ctx.config.get_service(name)
    if service is None:
        known = ", ".join(s.name for s in ctx.config.services)
        print(f"Error: Unknown service '{name}'. Configured services: {known}")  # noqa: T201
        raise SystemExit(EXIT_UNKNOWN_SERVICE)

    spec = service.to_spec()
    check = spec.readiness
    if check is None:
        print(f"{name}: no readiness check configured")  # noqa: T201
        raise SystemExit(EXIT_READY)

    effective_timeout = timeout if timeout is not None else spec.startup_timeout
    try:
        result = anyio.run(probe, check, effective_timeout, spec.probe_interval)
    except ProbeError as e:
        print(f"{name}: check failed: {e}")  # noqa: T201
        raise SystemExit(EXIT_PROBE_ERROR) from None

    if result is ProbeResult.READY:
        print(f"{name}: ready ({check.describe()})")  # noqa: T201
        raise SystemExit(EXIT_READY)

    print(f"{name}: not ready after {effective_timeout:g}s ({check.describe()})")  # noqa: T201
    raise SystemExit(EXIT_NOT_READY)
