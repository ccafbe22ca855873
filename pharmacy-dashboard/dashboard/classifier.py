"""
classifier.py
=============
Splits a ticket snapshot into today's active and finished buckets.

Pure functions of (snapshot, now); nothing is cached, so a long-running
process rolls over to the new day on its own.
"""

from datetime import datetime, time
from typing import List, NamedTuple, Sequence, Tuple

from .schemas import Ticket

ACTIVE = "active"
FINISHED = "finished"
BUCKETS = (ACTIVE, FINISHED)


class Buckets(NamedTuple):
    active: List[Ticket]
    finished: List[Ticket]

    def get(self, bucket: str) -> List[Ticket]:
        if bucket not in BUCKETS:
            raise KeyError(bucket)
        return getattr(self, bucket)


def _local(now: datetime) -> datetime:
    if now.tzinfo is not None:
        return now.astimezone().replace(tzinfo=None)
    return now


def day_window(now: datetime) -> Tuple[datetime, datetime]:
    """Local midnight and last microsecond of `now`'s calendar day."""
    day = _local(now).date()
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def classify(snapshot: Sequence[Ticket], now: datetime) -> Buckets:
    """
    1. sort newest first (stable for equal timestamps)
    2. keep tickets inside today's window, both ends inclusive
    3. split on the ACTIVE status flag
    """
    start, end = day_window(now)
    newest_first = sorted(snapshot, key=lambda t: t.timestamp, reverse=True)
    today = [t for t in newest_first if start <= t.timestamp <= end]
    return Buckets(
        active=[t for t in today if t.is_active],
        finished=[t for t in today if not t.is_active],
    )
