"""
ticker.py
- Fixed-period repeating timer for the periodic runners.
- Missed ticks are coalesced: after an overrun the next tick fires once, immediately,
  and the schedule restarts from that moment. At most one tick is ever pending.
"""

import asyncio

from conductor.core.constants import MISSED_TICK_TOLERANCE


class Ticker:
    def __init__(self, period, clock=None, sleep=asyncio.sleep):
        if period <= 0:
            raise ValueError("Ticker period must be positive")
        self.period = period
        self._clock = clock or (lambda: asyncio.get_running_loop().time())
        self._sleep = sleep
        self._deadline = None

    async def tick(self):
        """
        Wait for the next tick and return the time it fired.
        The first call fires immediately.
        """
        now = self._clock()
        deadline = now if self._deadline is None else self._deadline
        if now < deadline:
            await self._sleep(deadline - now)
            now = self._clock()

        # Only advance once the tick has fired so a cancelled wait keeps its deadline.
        if now - deadline > MISSED_TICK_TOLERANCE:
            self._deadline = now + self.period
        else:
            self._deadline = deadline + self.period
        return now

    async def wait(self, stop_event):
        """
        Race the next tick against `stop_event`.

        Returns:
            bool: True when the tick fired, False once stopping.
        """
        if stop_event.is_set():
            return False

        tick = asyncio.ensure_future(self.tick())
        stop = asyncio.ensure_future(stop_event.wait())
        try:
            await asyncio.wait({tick, stop}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for pending in (tick, stop):
                if not pending.done():
                    pending.cancel()
            await asyncio.gather(tick, stop, return_exceptions=True)

        if stop_event.is_set() or tick.cancelled():
            return False
        tick.result()
        return True
