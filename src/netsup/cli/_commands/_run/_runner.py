"""Async runner for the run command.

This module provides the async entry point that runs the supervisor and,
when a control port is configured, the control app together using anyio.
"""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

import anyio
import uvicorn

from netsup.cli._commands._shared import ExitCode

from ._app import create_control_app

if TYPE_CHECKING:
    from collections.abc import Generator

    from netsup.supervisor import RunReport, Supervisor


class ControlServer(uvicorn.Server):
    """Uvicorn server that leaves SIGINT/SIGTERM to the supervisor."""

    @contextlib.contextmanager
    def capture_signals(self) -> Generator[None, None, None]:
        yield


def exit_code_for(report: RunReport) -> ExitCode:
    """Map the outcome of a run to the process exit code.

    A startup failure wins over a shutdown failure, which wins over a
    service exiting on its own.

    Args:
        report: Report returned by Supervisor.run().

    Returns:
        The exit code for the process.
    """
    if report.startup_error is not None:
        return ExitCode.STARTUP_FAILURE
    if report.shutdown_error is not None:
        return ExitCode.SHUTDOWN_FAILURE
    if report.exited_service is not None:
        return ExitCode.SERVICE_EXITED
    return ExitCode.SUCCESS


async def run_supervisor(
    supervisor: Supervisor,
    control_host: str,
    control_port: int,
) -> RunReport:
    """Run the supervisor, with the control app when a port is given.

    Args:
        supervisor: The supervisor to run.
        control_host: Interface for the control API.
        control_port: Port for the control API. 0 disables it.

    Returns:
        The supervisor's run report.
    """
    if control_port == 0:
        return await supervisor.run()

    uvicorn_config = uvicorn.Config(
        app=create_control_app(supervisor),
        host=control_host,
        port=control_port,
        log_level="warning",
        access_log=False,
    )
    control_server = ControlServer(uvicorn_config)

    async with anyio.create_task_group() as tg:
        tg.start_soon(control_server.serve)

        report = await supervisor.run()

        # Supervisor has shut down, stop the control server
        control_server.should_exit = True

    return report
