"""
snapshot.py
===========
Holds the latest fetched ticket set and the one before it.
"""

from typing import List, Tuple

from .schemas import Ticket


class SnapshotStore:
    """
    Ticket snapshots owned by one DashboardSession.

     - `current`: what the dashboard shows (latest fetch minus confirmed deletes)
     - `fetched`: the latest fetch exactly as received, the diff baseline
     - `previous`: the fetch before that

    Only touched from the event loop thread.
    """

    def __init__(self):
        self._current: List[Ticket] = []
        self._fetched: List[Ticket] = []
        self._previous: List[Ticket] = []

    @property
    def current(self) -> List[Ticket]:
        return list(self._current)

    @property
    def fetched(self) -> List[Ticket]:
        return list(self._fetched)

    @property
    def previous(self) -> List[Ticket]:
        return list(self._previous)

    def replace(self, tickets: List[Ticket]) -> Tuple[List[Ticket], List[Ticket]]:
        """
        Install a freshly fetched set.
        Returns (baseline, fetched) for the diff engine, where baseline is
        the previous fetch as received, unaffected by local deletes.
        """
        self._previous = self._fetched
        self._fetched = list(tickets)
        self._current = list(tickets)
        return self.previous, self.fetched

    def remove(self, record_id) -> int:
        """
        Drop tickets whose id matches from the displayed set, keeping the
        order of the rest. Returns how many were removed.
        Ids are opaque and matched by their text form, so 42 and "42" are
        the same record.
        """
        kept = [t for t in self._current if not (t.has_identity and str(t.id) == str(record_id))]
        removed = len(self._current) - len(kept)
        self._current = kept
        return removed

    def find(self, record_id):
        for ticket in self._current:
            if ticket.has_identity and str(ticket.id) == str(record_id):
                return ticket
        return None

    def __len__(self):
        return len(self._current)
