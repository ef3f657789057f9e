"""One supervised daemon: spawn it, wait until it answers, stop it.

Only ServiceManager changes a service's state; the Supervisor decides
when, in which order, and what a failure means for the run.
"""

from __future__ import annotations

import os
import subprocess
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Literal, final

import anyio
import anyio.abc
import structlog
from anyio.streams.text import TextReceiveStream

from netsup.exceptions import (
    InvalidTransitionError,
    ProbeError,
    ServiceStopError,
    StartupError,
)

from ._backoff import ExponentialBackoff
from ._models import (
    ALLOWED_TRANSITIONS,
    ServiceEvent,
    ServiceEventType,
    ServiceSpec,
    ServiceState,
    ServiceStatus,
)
from ._probe import ProbeResult, probe

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ._protocol import OutputSink

_STDERR_TAIL = 200


def _now() -> str:
    return datetime.now(UTC).isoformat()


@final
class ServiceManager:
    """Manages the lifecycle of one supervised service.

    Spawns the start command, streams its stdout/stderr to an OutputSink,
    polls the readiness check and runs the stop sequence. Every state
    change goes through a transition check against the lifecycle
    Pending -> Starting -> {Ready, Failed} -> Stopped.

    Attributes:
        spec: Immutable definition of this service.
        status: Mutable runtime status tracking.
    """

    __slots__ = (
        "_exited",
        "_logger",
        "_output_sink",
        "_process",
        "spec",
        "status",
    )

    def __init__(
        self,
        spec: ServiceSpec,
        output_sink: OutputSink,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        self.spec = spec
        self.status = ServiceStatus()
        self._output_sink = output_sink
        base_logger: FilteringBoundLogger = logger or structlog.get_logger("netsup")
        self._logger = base_logger.bind(service=spec.name)
        self._process: anyio.abc.Process | None = None
        self._exited: anyio.Event | None = None

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def state(self) -> ServiceState:
        return self.status.state

    @property
    def pid(self) -> int | None:
        """PID of the start command while it runs."""
        return self.status.pid

    @property
    def has_exited(self) -> bool:
        """Return whether the start command process has exited."""
        return self._exited is not None and self._exited.is_set()

    async def wait_exited(self) -> None:
        """Wait for the start command process to exit.

        Returns immediately if the service was never spawned.
        """
        if self._exited is not None:
            await self._exited.wait()

    def _transition(self, target: ServiceState) -> None:
        current = self.status.state
        if target not in ALLOWED_TRANSITIONS[current]:
            msg = f"Service '{self.name}' cannot go from {current} to {target}"
            raise InvalidTransitionError(
                msg,
                service_name=self.name,
                current=current.value,
                target=target.value,
            )
        self.status.state = target
        self._logger.debug("service_state_changed", previous=current, state=target)

    async def emit_event(
        self,
        event_type: ServiceEventType,
        *,
        message: str | None = None,
        exit_code: int | None = None,
    ) -> None:
        """Tell the output sink about `event_type`, stamped with the current PID.

        A failing sink is logged and otherwise ignored.
        """
        event = ServiceEvent(
            service_name=self.name,
            event_type=event_type,
            timestamp=_now(),
            pid=self.status.pid,
            exit_code=exit_code,
            message=message,
        )
        try:
            await self._output_sink.write_event(self.name, event)
        except Exception:  # noqa: BLE001
            self._logger.warning("output_sink_failed", event_type=event_type)

    async def _stream_output(
        self,
        stream: TextReceiveStream,
        stream_name: Literal["stdout", "stderr"],
        pid: int,
    ) -> None:
        """Forward one pipe to the sink line by line.

        A trailing line without a newline is flushed when the pipe closes.
        """
        buffer = ""
        try:
            async for chunk in stream:
                buffer += chunk
                *lines, buffer = buffer.split("\n")
                for raw_line in lines:
                    await self._write_line(stream_name, pid, raw_line.rstrip("\r"))
        except (anyio.ClosedResourceError, anyio.BrokenResourceError):
            # Process exited
            pass

        if buffer:
            await self._write_line(stream_name, pid, buffer.rstrip("\r"))

    async def _write_line(
        self,
        stream_name: Literal["stdout", "stderr"],
        pid: int,
        line: str,
    ) -> None:
        try:
            await self._output_sink.write_line(self.name, pid, stream_name, line)
        except Exception:  # noqa: BLE001
            self._logger.warning("output_sink_failed", stream=stream_name)

    async def _watch_process(self, process: anyio.abc.Process) -> None:
        """Record the exit of the start command process."""
        exit_code = await process.wait()
        self.status.last_exit_code = exit_code
        self.status.pid = None
        if self._exited is not None:
            self._exited.set()
        self._logger.debug("service_process_exited", exit_code=exit_code)

    def _check_required_files(self) -> None:
        missing = [path for path in self.spec.required_files if not path.exists()]
        if missing:
            names = ", ".join(str(path) for path in missing)
            msg = f"Required file(s) missing: {names}"
            raise FileNotFoundError(msg)

    async def _fail(self, message: str, cause: Exception | None = None) -> StartupError:
        """Mark the service as failed and build the error to raise."""
        self._transition(ServiceState.FAILED)
        self.status.error = message
        self._logger.error("service_failed", reason=message)
        await self.emit_event(
            ServiceEventType.FAILED,
            message=message,
            exit_code=self.status.last_exit_code,
        )
        return StartupError(
            f"Service '{self.name}' failed to start: {message}",
            service_name=self.name,
            cause=cause,
        )

    async def start(self, task_group: anyio.abc.TaskGroup) -> None:
        """Spawn the start command.

        Output streaming and exit tracking run as tasks in the given task
        group, which must outlive the service. Does not wait for readiness;
        use wait_ready() for that.

        Args:
            task_group: Task group that owns the helper tasks.

        Raises:
            StartupError: If a required file is missing or the command
                cannot be spawned.
        """
        self._transition(ServiceState.STARTING)
        self.status.started_at = _now()
        self._logger.info("service_starting", command=list(self.spec.command))

        env: dict[str, str] | None = None
        if self.spec.env:
            env = {**os.environ, **self.spec.env}

        try:
            self._check_required_files()
            self._exited = anyio.Event()
            process = await anyio.open_process(
                self.spec.command,
                cwd=self.spec.cwd,
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise await self._fail(str(e), cause=e) from e

        self._process = process
        self.status.pid = process.pid

        if process.stdout is not None:
            task_group.start_soon(
                self._stream_output,
                TextReceiveStream(process.stdout, errors="replace"),
                "stdout",
                process.pid,
            )
        if process.stderr is not None:
            task_group.start_soon(
                self._stream_output,
                TextReceiveStream(process.stderr, errors="replace"),
                "stderr",
                process.pid,
            )
        task_group.start_soon(self._watch_process, process)

        await self.emit_event(
            ServiceEventType.SPAWNED,
            message=f"Started with command: {' '.join(self.spec.command)}",
        )

    async def wait_ready(self) -> None:
        """Wait until the service is ready or its startup timeout elapses.

        A daemonizing service must first see its start command exit 0. A
        foreground service fails if its process exits before the readiness
        check succeeds.

        Raises:
            StartupError: If the service does not become ready in time.
        """
        deadline = anyio.current_time() + self.spec.startup_timeout

        if self.spec.daemonizes:
            await self._wait_for_daemon_fork(deadline)

        try:
            result = await self._probe_until_ready(deadline)
        except ProbeError as e:
            e.service_name = self.name
            raise await self._fail(f"Readiness check failed: {e}", cause=e) from e

        if result is None:
            code = self.status.last_exit_code
            raise await self._fail(f"Exited with code {code} before becoming ready")

        if result is ProbeResult.TIMED_OUT:
            timeout = self.spec.startup_timeout
            target = self.spec.readiness.describe() if self.spec.readiness else "-"
            message = f"Not ready after {timeout:g}s ({target})"
            raise await self._fail(message, cause=TimeoutError(message))

        self._transition(ServiceState.READY)
        self.status.ready_at = _now()
        self._logger.info("service_ready", probe_attempts=self.status.probe_attempts)
        await self.emit_event(ServiceEventType.READY)

    async def _wait_for_daemon_fork(self, deadline: float) -> None:
        with anyio.move_on_after(max(deadline - anyio.current_time(), 0.0)):
            await self.wait_exited()

        if not self.has_exited:
            timeout = self.spec.startup_timeout
            message = f"Start command did not exit within {timeout:g}s"
            raise await self._fail(message, cause=TimeoutError(message))

        if self.status.last_exit_code != 0:
            code = self.status.last_exit_code
            raise await self._fail(f"Start command exited with code {code}")

    def _record_attempt(self, attempt: int, ready: bool) -> None:  # noqa: FBT001
        self.status.probe_attempts = attempt
        self._logger.debug("readiness_checked", attempt=attempt, ready=ready)

    async def _probe_until_ready(self, deadline: float) -> ProbeResult | None:
        """Poll the readiness check, racing it against process exit.

        Returns:
            The probe result, or None if a foreground process exited first.
        """
        check = self.spec.readiness
        if check is None:
            return ProbeResult.READY

        backoff = ExponentialBackoff(
            base=self.spec.probe_interval,
            max_delay=self.spec.probe_max_interval,
            multiplier=self.spec.probe_backoff,
        )

        async def run_probe() -> ProbeResult:
            return await probe(
                check,
                max(deadline - anyio.current_time(), 0.0),
                self.spec.probe_interval,
                backoff=backoff,
                on_attempt=self._record_attempt,
            )

        if self.spec.daemonizes:
            return await run_probe()

        result: ProbeResult | None = None
        probe_error: ProbeError | None = None

        async with anyio.create_task_group() as tg:

            async def probe_task() -> None:
                nonlocal result, probe_error
                try:
                    result = await run_probe()
                except ProbeError as e:
                    probe_error = e
                tg.cancel_scope.cancel()

            async def exit_task() -> None:
                await self.wait_exited()
                tg.cancel_scope.cancel()

            tg.start_soon(probe_task)
            tg.start_soon(exit_task)

        if probe_error is not None:
            raise probe_error
        return result

    async def _run_stop_command(self, command: tuple[str, ...]) -> None:
        env = {**os.environ, **self.spec.env} if self.spec.env else None
        timeout = self.spec.shutdown_timeout
        try:
            with anyio.fail_after(timeout):
                result = await anyio.run_process(
                    command,
                    cwd=self.spec.cwd,
                    env=env,
                    check=False,
                )
        except TimeoutError as e:
            msg = f"Stop command for '{self.name}' timed out after {timeout:g}s"
            raise ServiceStopError(msg, service_name=self.name, cause=e) from e
        except OSError as e:
            msg = f"Failed to run stop command for '{self.name}': {e}"
            raise ServiceStopError(msg, service_name=self.name, cause=e) from e

        if result.returncode != 0:
            stderr = result.stderr.decode(errors="replace").strip()[-_STDERR_TAIL:]
            msg = f"Stop command for '{self.name}' exited with code {result.returncode}"
            if stderr:
                msg = f"{msg}: {stderr}"
            raise ServiceStopError(msg, service_name=self.name)

    async def _terminate_process(self, *, graceful: bool) -> bool:
        """Terminate the start command process if it is still alive.

        Sends the stop signal and waits for the shutdown timeout before
        killing. With graceful=False the process is killed straight away.

        Returns:
            True if the process had to be killed.
        """
        process = self._process
        if process is None:
            return False

        killed = False
        try:
            if process.returncode is None:
                if graceful:
                    process.send_signal(self.spec.stop_signal)
                    with anyio.move_on_after(self.spec.shutdown_timeout):
                        _ = await process.wait()

                if process.returncode is None:
                    process.kill()
                    killed = True
                    _ = await process.wait()
        except ProcessLookupError:
            # Process already exited
            pass

        self.status.last_exit_code = process.returncode
        self.status.pid = None
        await process.aclose()
        self._process = None
        return killed

    async def stop(self) -> None:
        """Stop a ready service.

        Runs the stop command, if any, then terminates the start command
        process if it is still alive. The service ends up Stopped even when
        a step fails.

        Raises:
            ServiceStopError: If the stop command fails or times out, or the
                process cannot be signalled.
        """
        if self.status.state != ServiceState.READY:
            msg = f"Service '{self.name}' cannot be stopped from {self.status.state}"
            raise InvalidTransitionError(
                msg,
                service_name=self.name,
                current=self.status.state.value,
                target=ServiceState.STOPPED.value,
            )

        self._logger.info("service_stopping")
        await self.emit_event(ServiceEventType.STOPPING)

        failure: ServiceStopError | None = None
        if self.spec.stop_command is not None:
            try:
                await self._run_stop_command(self.spec.stop_command)
            except ServiceStopError as e:
                failure = e

        killed = False
        try:
            killed = await self._terminate_process(graceful=True)
        except OSError as e:
            if failure is None:
                msg = f"Failed to stop service '{self.name}': {e}"
                failure = ServiceStopError(msg, service_name=self.name, cause=e)

        self._transition(ServiceState.STOPPED)
        self.status.stopped_at = _now()

        if failure is not None:
            self.status.error = str(failure)
            self._logger.error("service_stop_failed", reason=str(failure))
            await self.emit_event(ServiceEventType.STOP_FAILED, message=str(failure))
            raise failure

        message = "Killed after shutdown timeout" if killed else "Stopped by request"
        self._logger.info("service_stopped", killed=killed)
        await self.emit_event(
            ServiceEventType.STOPPED,
            exit_code=self.status.last_exit_code,
            message=message,
        )

    async def force_cleanup(self, reason: str = "Startup aborted") -> None:
        """Kill whatever a failed or interrupted start left behind.

        The stop command is never run. A service still Starting is marked
        Failed first; the service ends up Stopped.

        Args:
            reason: Why the start was abandoned, recorded when the service
                was still Starting.
        """
        if self.status.state == ServiceState.STARTING:
            _ = await self._fail(reason)

        if self.status.state != ServiceState.FAILED:
            return

        _ = await self._terminate_process(graceful=False)
        self._transition(ServiceState.STOPPED)
        self.status.stopped_at = _now()
        self._logger.info("service_cleaned_up")
        await self.emit_event(
            ServiceEventType.CLEANED_UP,
            exit_code=self.status.last_exit_code,
        )
