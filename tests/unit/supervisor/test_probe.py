from dataclasses import dataclass, field

import anyio
import pytest

from netsup.exceptions import ProbeError
from netsup.supervisor import ExponentialBackoff, ProbeResult, ReadinessCheck, probe


@dataclass
class ScriptedCheck:
    """Check returning scripted results; the last one repeats."""

    results: list[bool]
    delay: float = 0.0
    calls: int = 0
    attempts: list[tuple[int, bool]] = field(default_factory=list)

    def describe(self) -> str:
        return "scripted"

    async def check(self) -> bool:
        self.calls += 1
        if self.delay:
            await anyio.sleep(self.delay)
        index = min(self.calls, len(self.results)) - 1
        return self.results[index]

    def record(self, attempt: int, ready: bool) -> None:  # noqa: FBT001
        self.attempts.append((attempt, ready))


@dataclass
class BrokenCheck:
    def describe(self) -> str:
        return "broken"

    async def check(self) -> bool:
        msg = "no such host"
        raise ProbeError(msg, target="tcp://nowhere:1")


class TestReadinessCheckProtocol:
    def test_scripted_check_satisfies_protocol(self) -> None:
        assert isinstance(ScriptedCheck([True]), ReadinessCheck)


@pytest.mark.anyio
class TestProbe:
    async def test_ready_on_first_check(self) -> None:
        check = ScriptedCheck([True])

        result = await probe(check, timeout=1.0, interval=0.01)

        assert result is ProbeResult.READY
        assert check.calls == 1

    async def test_polls_until_ready(self) -> None:
        check = ScriptedCheck([False, False, True])

        result = await probe(check, 2.0, 0.01, on_attempt=check.record)

        assert result is ProbeResult.READY
        assert check.attempts == [(1, False), (2, False), (3, True)]

    async def test_times_out_when_never_ready(self) -> None:
        check = ScriptedCheck([False])

        start = anyio.current_time()
        result = await probe(check, timeout=0.2, interval=0.02)
        elapsed = anyio.current_time() - start

        assert result is ProbeResult.TIMED_OUT
        assert check.calls >= 2
        assert 0.2 <= elapsed < 2.0

    async def test_zero_timeout_still_checks_once(self) -> None:
        check = ScriptedCheck([True])

        result = await probe(check, timeout=0.0, interval=0.01)

        assert result is ProbeResult.READY
        assert check.calls == 1

    async def test_zero_timeout_not_ready_checks_exactly_once(self) -> None:
        check = ScriptedCheck([False])

        result = await probe(check, timeout=0.0, interval=0.01)

        assert result is ProbeResult.TIMED_OUT
        assert check.calls == 1

    async def test_check_overrunning_the_timeout_counts_as_not_ready(self) -> None:
        check = ScriptedCheck([True], delay=10.0)

        start = anyio.current_time()
        result = await probe(check, timeout=0.2, interval=0.05)

        assert result is ProbeResult.TIMED_OUT
        assert anyio.current_time() - start < 2.0

    async def test_probe_error_propagates(self) -> None:
        with pytest.raises(ProbeError, match="no such host"):
            _ = await probe(BrokenCheck(), timeout=1.0, interval=0.01)

    async def test_cancellation_interrupts_sleep(self) -> None:
        check = ScriptedCheck([False])

        start = anyio.current_time()
        with anyio.move_on_after(0.1) as scope:
            _ = await probe(check, timeout=30.0, interval=10.0)

        assert scope.cancelled_caught
        assert anyio.current_time() - start < 2.0
        assert check.calls == 1

    async def test_uses_backoff_for_sleeps(self) -> None:
        check = ScriptedCheck([False, False, True])
        backoff = ExponentialBackoff(base=0.01, max_delay=0.02, multiplier=2.0)

        result = await probe(check, 2.0, 0.01, backoff=backoff)

        assert result is ProbeResult.READY
        assert check.calls == 3
