"""
mock_feed.py
============
An in-memory ticket feed for local runs and tests (no network).
Records are kept in wire format so they go through the same parsing
as the HTTP feed.
"""

import asyncio
import datetime
import itertools

from .errors import DeleteFailure, FetchFailure
from .models import TicketStatus
from .schemas import parse_tickets


class MockFeed:
    """
    A mock version of the feed service.
    Failures can be scripted with `fail_fetches` / `fail_deletes`
    and every call can be slowed down with `latency` (seconds).
    """

    def __init__(self, records=None, latency: float = 0.0):
        self.records = [dict(r) for r in (records or [])]
        self.latency = latency
        self.fail_fetches = 0
        self.fail_deletes = 0
        self.fetch_calls = 0
        self.delete_calls = []
        self._ids = itertools.count(1 + max(
            (r["patientrecord_id"] for r in self.records
             if isinstance(r.get("patientrecord_id"), int)),
            default=0,
        ))

    @classmethod
    def demo(cls):
        """A feed with a few of today's check-ins."""
        feed = cls()
        now = datetime.datetime.now().replace(second=0, microsecond=0)
        feed.add("Somchai Jaidee", patient_id="6401001", role="student",
                 datetime=(now - datetime.timedelta(minutes=5)).isoformat(),
                 symptom_names="fever, cough")
        feed.add("Suda Rakdee", patient_id="6401002", role="student",
                 datetime=(now - datetime.timedelta(minutes=40)).isoformat(),
                 symptom_names="headache")
        feed.add("Anan Wongsa", patient_id="S-1120", role="staff",
                 datetime=(now - datetime.timedelta(hours=1)).isoformat(),
                 status=TicketStatus.finished.value,
                 symptom_names="sore throat",
                 pillstock_ids="L-204,L-311", pill_names="Paracetamol,Strepsils",
                 pill_quantities="10,8", unit_type="tablet")
        return feed

    def add(self, patient_name: str, **fields) -> dict:
        """Append a record as if the feed service had checked a patient in."""
        record = {
            "patientrecord_id": next(self._ids),
            "patient_name": patient_name,
            "datetime": datetime.datetime.now().isoformat(),
            "status": TicketStatus.active.value,
        }
        record.update(fields)
        self.records.append(record)
        return record

    async def fetch_all(self):
        self.fetch_calls += 1
        # snapshot before the simulated delay, like a server answering at request time
        payload = [dict(r) for r in self.records]
        await asyncio.sleep(self.latency)
        if self.fail_fetches:
            self.fail_fetches -= 1
            raise FetchFailure("Network response was not ok (503)")
        return parse_tickets(payload)

    async def delete(self, record_id):
        self.delete_calls.append(record_id)
        await asyncio.sleep(self.latency)
        if self.fail_deletes:
            self.fail_deletes -= 1
            raise DeleteFailure(record_id, "Network response was not ok (500)")
        kept = [r for r in self.records if str(r.get("patientrecord_id")) != str(record_id)]
        if len(kept) == len(self.records):
            raise DeleteFailure(record_id, "Network response was not ok (404)")
        self.records = kept
