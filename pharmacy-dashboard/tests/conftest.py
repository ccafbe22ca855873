"""
conftest.py
===========
Shared test setup:
 - makes the `dashboard` package importable when running from /tests
 - points the feed service at a throwaway SQLite file
 - shortens the polling interval so loop tests finish quickly
"""

import sys, os
# Ensure the dashboard package is discoverable by Python when running from /tests
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import datetime
import tempfile

import pytest

# Must be set before any dashboard module is imported
_db_dir = tempfile.mkdtemp()
os.environ["DASHBOARD_FEED_DB"] = os.path.join(_db_dir, "feed.db")
os.environ["DASHBOARD_POLL_INTERVAL"] = "0.05"
os.environ["DASHBOARD_USE_MOCK_FEED"] = "false"
os.environ.pop("PUSHOVER_TOKEN", None)
os.environ.pop("PUSHOVER_USER", None)

from dashboard.schemas import Ticket


@pytest.fixture
def today():
    """A fixed 'now' in the middle of a day."""
    return datetime.datetime(2024, 3, 14, 10, 30, 0)


@pytest.fixture
def make_ticket(today):
    """
    Factory for tickets. Positional id, keyword overrides;
    timestamps default to `today` minus `minutes_ago`.
    """
    def _make(record_id, name=None, minutes_ago=0, status=1, **fields):
        fields.setdefault("timestamp", today - datetime.timedelta(minutes=minutes_ago))
        return Ticket(
            id=record_id,
            patient_name=name or f"Patient {record_id}",
            status=status,
            **fields,
        )
    return _make
