"""Readiness prober.

Polls a ReadinessCheck until it succeeds or a timeout elapses. Waiting is
done with anyio sleeps, so cancelling the surrounding scope (for example
on a termination signal) interrupts a probe immediately.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

import anyio

from ._backoff import ExponentialBackoff

if TYPE_CHECKING:
    from collections.abc import Callable

    from ._protocol import ReadinessCheck


class ProbeResult(StrEnum):
    """Outcome of a readiness probe."""

    READY = "ready"
    TIMED_OUT = "timed_out"


async def probe(
    check: ReadinessCheck,
    timeout: float,
    interval: float,
    *,
    backoff: ExponentialBackoff | None = None,
    on_attempt: Callable[[int, bool], None] | None = None,
) -> ProbeResult:
    """Poll a readiness check until it succeeds or the timeout elapses.

    The check runs at least once, even with a zero timeout. Each individual
    check is bounded by the time remaining; a check that overruns counts
    as not ready.

    Args:
        check: The readiness check to poll.
        timeout: Total seconds allowed for the service to become ready.
        interval: Seconds to sleep between checks.
        backoff: Optional interval calculator. Defaults to a fixed interval.
        on_attempt: Called after every check with the attempt number
            (1-based) and whether the check succeeded.

    Returns:
        ProbeResult.READY as soon as the check returns True, otherwise
        ProbeResult.TIMED_OUT once the cumulative elapsed time reaches
        the timeout.

    Raises:
        ProbeError: If the check reports that it is broken.
    """
    delays = backoff or ExponentialBackoff(base=interval, max_delay=interval)
    deadline = anyio.current_time() + timeout
    attempt = 0

    while True:
        remaining = deadline - anyio.current_time()
        if attempt > 0 and remaining <= 0:
            return ProbeResult.TIMED_OUT

        # The first check gets a full interval even when the budget is spent
        budget = remaining if attempt > 0 else max(remaining, interval)
        ready = False
        with anyio.move_on_after(budget):
            ready = await check.check()

        attempt += 1
        if on_attempt is not None:
            on_attempt(attempt, ready)

        if ready:
            return ProbeResult.READY

        remaining = deadline - anyio.current_time()
        if remaining <= 0:
            return ProbeResult.TIMED_OUT

        await anyio.sleep(min(delays.delay(attempt - 1), remaining))
