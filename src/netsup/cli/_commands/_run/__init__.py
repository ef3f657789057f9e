"""netsup run command - starts the configured services in order."""

from typing import Annotated

import anyio
from cyclopts import App, Parameter
from rich.console import Console

from netsup.cli._commands._context import CLIContext
from netsup.cli._commands._shared import ExitCode, exit_with_error
from netsup.exceptions import InvalidServiceSpecError
from netsup.supervisor import ConsoleOutputSink, NullOutputSink, Supervisor

from ._runner import exit_code_for, run_supervisor

app = App(
    name="run",
    help="Start the configured services in order and supervise them",
    help_on_error=True,
)


@app.default
def run(
    *,
    control_port: Annotated[
        int | None,
        Parameter(help="Port for the control API (0 disables it)."),
    ] = None,
    control_host: Annotated[
        str | None,
        Parameter(help="Interface for the control API."),
    ] = None,
) -> None:
    """Start every configured service and wait for a termination signal.

    Services start one after another; each must be ready before the next
    one is spawned. SIGINT or SIGTERM stops them in reverse order.

    Exit codes: 0 clean shutdown, 1 configuration error, 2 startup
    failure, 3 shutdown failure, 4 a service exited on its own.
    """
    ctx = CLIContext.get_current()
    config = ctx.config
    if config is None:
        exit_with_error(f"Cannot load configuration: {ctx.config_error}")

    output_sink = (
        NullOutputSink()
        if ctx.quiet
        else ConsoleOutputSink(Console(no_color=ctx.no_color))
    )

    try:
        supervisor = Supervisor(config.to_specs(), output_sink, logger=ctx.logger)
    except InvalidServiceSpecError as e:
        exit_with_error(str(e))

    host = control_host if control_host is not None else config.supervisor.control_host
    port = control_port if control_port is not None else config.supervisor.control_port

    report = anyio.run(run_supervisor, supervisor, host, port)
    code = exit_code_for(report)
    if code != ExitCode.SUCCESS:
        if report.startup_error is not None:
            print(f"Startup failed: {report.startup_error}")  # noqa: T201
        if report.shutdown_error is not None:
            print(f"Shutdown failed: {report.shutdown_error}")  # noqa: T201
            for failure in report.shutdown_error.failures:
                print(f"  {failure}")  # noqa: T201
        if report.exited_service is not None:
            print(f"Service '{report.exited_service}' exited unexpectedly")  # noqa: T201
    raise SystemExit(code)
