"""
Interval Timer
==============

Repeating timer driving capture attempts.

Ticks are aligned to a fixed schedule (start + n * period). When handling
a tick takes longer than the period, the missed ticks are skipped and the
next tick is aligned to the first schedule point after "now"; ticks never
queue up or run concurrently.
"""

import asyncio
import logging


logger = logging.getLogger(__name__)


class IntervalTimer:
    """
    Fixed-period timer for use inside a running event loop.

    Attributes:
        period: Seconds between ticks

    Example:
        timer = IntervalTimer(60.0)
        while True:
            await timer.tick()    # first tick completes immediately
            capture()
    """

    def __init__(self, period: float, first_tick_now: bool = True) -> None:
        """
        Arm the timer.

        Args:
            period: Seconds between ticks. Must be > 0.
            first_tick_now: Complete the first tick immediately. When False
                the first tick fires one full period from now.
        """
        if period <= 0:
            raise ValueError("period must be > 0")

        self._period = float(period)
        now = asyncio.get_running_loop().time()
        self._deadline = now if first_tick_now else now + self._period
        self._skipped: int = 0

    @property
    def period(self) -> float:
        return self._period

    @property
    def skipped(self) -> int:
        """Number of schedule points skipped because handling overran."""
        return self._skipped

    async def tick(self) -> None:
        """
        Wait for the next schedule point.

        Cancelling a pending tick leaves the schedule unchanged.
        """
        loop = asyncio.get_running_loop()
        delay = self._deadline - loop.time()
        if delay > 0:
            await asyncio.sleep(delay)

        now = loop.time()
        self._deadline += self._period
        if self._deadline <= now:
            missed = int((now - self._deadline) // self._period) + 1
            self._deadline += missed * self._period
            self._skipped += missed
            logger.debug(f"Timer overran, skipped {missed} tick(s)")
