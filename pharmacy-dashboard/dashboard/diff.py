"""
diff.py
=======
New-arrival detection between two consecutive ticket fetches.
"""

from typing import List, Sequence

from .schemas import Ticket


def detect_arrivals(previous: Sequence[Ticket], current: Sequence[Ticket]) -> List[Ticket]:
    """
    Return the tickets in `current` whose id is absent from `previous`.

    Nothing is reported when `previous` is empty (the first load is the
    baseline) or when `current` is not larger than `previous`. The size
    check means one removal plus one addition in the same interval goes
    unannounced. Tickets without an id are never reported.
    """
    if not previous or len(current) <= len(previous):
        return []

    known_ids = {t.id for t in previous if t.has_identity}
    return [t for t in current if t.has_identity and t.id not in known_ids]
