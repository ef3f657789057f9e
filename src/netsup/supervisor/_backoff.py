"""Poll interval calculator for readiness probes.

This module provides a small exponential backoff implementation used to
space out readiness checks. With the default multiplier of 1.0 the
interval stays fixed.
"""

import math
import random
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Exponential backoff calculator with optional jitter.

    The delay formula is:
        delay = min(base * (multiplier ^ attempt), max_delay)
        delay = delay * (1 - jitter/2 + random() * jitter)

    Attributes:
        base: Delay in seconds after the first failed check.
        max_delay: Maximum delay in seconds.
        multiplier: Factor to multiply delay for each attempt.
        jitter: Fraction of delay to randomize (0.0-1.0).
    """

    base: float = 0.5
    max_delay: float = 5.0
    multiplier: float = 1.0
    jitter: float = 0.0

    def delay(self, attempt: int) -> float:
        """Calculate the delay for a given attempt number.

        Args:
            attempt: The attempt number (0-indexed, where 0 follows the
                first failed check).

        Returns:
            The delay in seconds before the next check.
        """
        try:
            exponential_delay = self.base * (self.multiplier**attempt)
        except OverflowError:
            exponential_delay = math.inf

        # A fixed interval above max_delay is kept as configured
        capped_delay = min(exponential_delay, max(self.max_delay, self.base))

        if self.jitter > 0:
            jitter_range = capped_delay * self.jitter
            jitter_offset = random.uniform(-jitter_range / 2, jitter_range / 2)  # noqa: S311
            capped_delay = max(0.0, capped_delay + jitter_offset)

        return capped_delay
