"""
dashboard_manager.py
====================
This module wires the synchronization engine together for one dashboard:
 - Polls the ticket feed while the user is signed in
 - Detects new arrivals and notifies observers
 - Classifies today's tickets into active / finished and paginates them
 - Deletes tickets and reflects the result locally
 - Keeps the latest error for the presentation layer
"""

import asyncio
import datetime
import enum
import inspect
from typing import Callable, Dict, List, Optional

from .classifier import BUCKETS, Buckets, classify
from .diff import detect_arrivals
from .errors import DeleteFailure, FetchFailure, MalformedRecord
from .gateway import MutationGateway
from .navigation import navigation_target
from .pagination import PAGE_SIZE, Paginator
from .poller import POLL_INTERVAL, Poller
from .schemas import PageView, Ticket
from .snapshot import SnapshotStore

# ---------------------------------------------------------------------------
# SESSION STATE
# ---------------------------------------------------------------------------

class SessionState(str, enum.Enum):
    """Sign-in state reported by the auth layer. Polling runs only when ready."""
    loading = "loading"
    ready = "ready"
    absent = "absent"


ArrivalObserver = Callable[[Ticket], object]

# ---------------------------------------------------------------------------
# DASHBOARD SESSION
# ---------------------------------------------------------------------------

class DashboardSession:
    """
    Single-consumer view over the remote ticket feed.
    All state is owned here; nothing is shared between sessions.
    """

    def __init__(self, feed, interval: float = POLL_INTERVAL, page_size: int = PAGE_SIZE,
                 clock: Callable[[], datetime.datetime] = datetime.datetime.now):
        self.feed = feed
        self.store = SnapshotStore()
        self.gateway = MutationGateway(feed, self.store)
        self.poller = Poller(feed.fetch_all, self._apply_fetch, self._record_fetch_error, interval)
        self.paginators: Dict[str, Paginator] = {b: Paginator(page_size) for b in BUCKETS}
        self.state = SessionState.loading
        self.loading = True
        self.current_error: Optional[str] = None
        self._clock = clock
        self._observers: List[ArrivalObserver] = []
        self._observer_tasks = set()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def set_session_state(self, state):
        """Arm polling on `ready`, stop it on `loading` / `absent`."""
        self.state = SessionState(state)
        if self.state is SessionState.ready:
            self.poller.arm()
        else:
            self.poller.cancel()

    def shutdown(self):
        self.poller.cancel()

    # ------------------------------------------------------------------
    # Arrivals
    # ------------------------------------------------------------------

    def on_arrival(self, callback: ArrivalObserver) -> ArrivalObserver:
        """Register an observer called once per new ticket. Coroutine observers are scheduled."""
        self._observers.append(callback)
        return callback

    def _notify(self, ticket: Ticket):
        for callback in self._observers:
            try:
                result = callback(ticket)
            except Exception as e:
                print(f"⚠️ Arrival observer {callback!r} failed: {e}")
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._observer_tasks.add(task)
                task.add_done_callback(self._observer_done)

    def _observer_done(self, task: asyncio.Task):
        self._observer_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            print(f"⚠️ Arrival observer failed: {task.exception()}")

    # ------------------------------------------------------------------
    # Poll results
    # ------------------------------------------------------------------

    def _apply_fetch(self, tickets: List[Ticket]):
        previous, current = self.store.replace(tickets)
        self.loading = False
        self.current_error = None
        print(f"🧾 Fetched {len(current)} tickets")

        for ticket in detect_arrivals(previous, current):
            print(f"🆕 New patient: {ticket.patient_name} (ticket {ticket.id})")
            self._notify(ticket)

    def _record_fetch_error(self, error: FetchFailure):
        self.loading = False
        self.current_error = str(error)
        print(f"❌ Error fetching tickets: {error}")

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def buckets(self, now: Optional[datetime.datetime] = None) -> Buckets:
        return classify(self.store.current, now or self._clock())

    def active_page(self, bucket: str, now: Optional[datetime.datetime] = None) -> PageView:
        """Current page of `bucket` ('active' or 'finished'). Raises KeyError on unknown buckets."""
        items = self.buckets(now).get(bucket)
        paginator = self.paginators[bucket]
        return PageView(
            bucket=bucket,
            page=paginator.page,
            total_pages=paginator.total_pages(items),
            items=paginator.slice(items),
        )

    def go_to_page(self, bucket: str, page: int):
        if bucket not in self.paginators:
            raise KeyError(bucket)
        self.paginators[bucket].go_to(page)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def request_delete(self, record_id) -> bool:
        """Delete a ticket. On failure the error is kept and the snapshot is unchanged."""
        try:
            await self.gateway.delete(record_id)
        except DeleteFailure as e:
            self.current_error = str(e)
            print(f"❌ Error deleting ticket {record_id}: {e}")
            return False
        self.current_error = None
        return True

    def request_navigate(self, target) -> Optional[str]:
        """
        Link to the dispensing screen for a ticket (or a ticket id), or None
        when it can't be opened.
        """
        ticket = target if isinstance(target, Ticket) else self.store.find(target)
        if ticket is None:
            print(f"⚠️ Invalid ticket data: no ticket with patientrecord_id {target!r}")
            return None
        try:
            return navigation_target(ticket)
        except MalformedRecord as e:
            print(f"⚠️ {e}")
            return None
