"""
poller.py
=========
Repeating fetch of the full ticket feed on a fixed interval.
"""

import asyncio
import os
from typing import Awaitable, Callable, List, Optional

from .errors import FetchFailure
from .schemas import Ticket

POLL_INTERVAL = float(os.getenv("DASHBOARD_POLL_INTERVAL", "5"))


class Poller:
    """
    Cancellable repeating task with an owned handle.

    `arm()` fetches immediately and then every `interval` seconds. Each
    fetch runs as its own task, so a slow fetch does not delay the next
    tick and overlapping fetches land in completion order.

    `cancel()` stops the timer before it returns. Fetches already in
    flight are left to finish, but their results are dropped.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[List[Ticket]]],
        on_result: Callable[[List[Ticket]], None],
        on_error: Callable[[FetchFailure], None],
        interval: float = POLL_INTERVAL,
    ):
        self.interval = interval
        self._fetch = fetch
        self._on_result = on_result
        self._on_error = on_error
        self._timer: Optional[asyncio.Task] = None
        self._in_flight = set()
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._timer is not None

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def arm(self):
        """Start polling. No-op when already armed. Needs a running loop."""
        if self._timer is not None:
            return
        self._generation += 1
        self._timer = asyncio.get_running_loop().create_task(self._tick_forever(self._generation))
        print(f"⏱️ Polling every {self.interval:g}s")

    def cancel(self):
        """Stop polling and invalidate fetches that are still in flight."""
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None
        self._generation += 1
        print("⏹️ Polling stopped")

    async def _tick_forever(self, generation: int):
        while True:
            task = asyncio.create_task(self._poll_once(generation))
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
            await asyncio.sleep(self.interval)

    async def _poll_once(self, generation: int):
        try:
            tickets = await self._fetch()
        except Exception as e:
            # Anything the feed raises is reported like a fetch failure.
            failure = e if isinstance(e, FetchFailure) else FetchFailure(f"Error fetching tickets: {e}")
            if generation == self._generation:
                self._on_error(failure)
            else:
                print(f"🗑️ Dropping fetch error after teardown: {failure}")
            return

        if generation != self._generation:
            print("🗑️ Dropping fetch result that resolved after teardown")
            return
        self._on_result(tickets)
