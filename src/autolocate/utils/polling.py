"""
Polling utilities with a fixed interval and a hard deadline.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Optional


def now_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000


@dataclass
class Deadline:
    """
    A point in time after which polling stops.

    Example:
        >>> deadline = Deadline(timeout_ms=2000)
        >>> while not deadline.expired:
        ...     await deadline.sleep(300)
    """
    timeout_ms: float
    started_ms: float = field(default_factory=now_ms)

    @property
    def elapsed_ms(self) -> float:
        return now_ms() - self.started_ms

    @property
    def remaining_ms(self) -> float:
        return max(0.0, self.timeout_ms - self.elapsed_ms)

    @property
    def expired(self) -> bool:
        return self.elapsed_ms >= self.timeout_ms

    def cap(self, timeout_ms: float) -> float:
        """Clamp a per-operation timeout to what is left."""
        return min(timeout_ms, self.remaining_ms)

    async def sleep(self, interval_ms: float) -> None:
        """Sleep for the interval, never past the deadline."""
        delay = self.cap(interval_ms)
        if delay > 0:
            await asyncio.sleep(delay / 1000)


def budget(timeout_ms: float, deadline: Optional[Deadline]) -> float:
    """Per-phase timeout, reduced to the remaining budget when one is set."""
    if deadline is None:
        return timeout_ms
    return deadline.cap(timeout_ms)
