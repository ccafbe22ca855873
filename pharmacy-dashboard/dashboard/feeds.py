"""
feeds.py
========
Ticket feed factory and HTTP transport for the dashboard engine.
This file allows the session to use either:
 - MockFeed (for local demo and tests)
 - HttpFeed (for production, against the feed service)
"""

import asyncio
import os
from urllib.parse import quote

import requests

from .errors import DeleteFailure, FetchFailure
from .mock_feed import MockFeed
from .schemas import parse_tickets

# Use the real feed by default (set DASHBOARD_USE_MOCK_FEED=true for offline demo)
USE_MOCK_FEED = os.getenv("DASHBOARD_USE_MOCK_FEED", "false").lower() == "true"
FEED_URL = os.getenv("DASHBOARD_FEED_URL", "http://localhost:3000")
HTTP_TIMEOUT = float(os.getenv("DASHBOARD_HTTP_TIMEOUT", "10"))


class HttpFeed:
    """
    Talks to the feed service over HTTP.

    `requests` is blocking, so each call runs in a worker thread and the
    event loop stays free while a fetch or delete is outstanding. Any
    requests-compatible session can be injected (tests pass a TestClient).
    """

    def __init__(self, base_url: str = FEED_URL, session=None, timeout: float = HTTP_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session if session is not None else requests.Session()

    async def fetch_all(self):
        return await asyncio.to_thread(self._fetch_all)

    async def delete(self, record_id):
        await asyncio.to_thread(self._delete, record_id)

    def _fetch_all(self):
        try:
            res = self._session.get(f"{self.base_url}/api/dashboard", timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchFailure(f"Error fetching tickets: {e}") from e
        if not 200 <= res.status_code < 300:
            raise FetchFailure(f"Network response was not ok ({res.status_code})")
        try:
            payload = res.json()
        except ValueError as e:
            raise FetchFailure(f"Ticket feed returned invalid JSON: {e}") from e
        return parse_tickets(payload)

    def _delete(self, record_id):
        url = f"{self.base_url}/api/ticket/{quote(str(record_id), safe='')}"
        try:
            res = self._session.delete(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise DeleteFailure(record_id, f"Error deleting ticket: {e}") from e
        if not 200 <= res.status_code < 300:
            raise DeleteFailure(record_id, f"Network response was not ok ({res.status_code})")


def make_feed():
    """
    Factory function to create the ticket feed the session polls.
    Example: make_feed() -> HttpFeed('http://localhost:3000')
    """
    if USE_MOCK_FEED:
        print("🧪 Using in-memory mock ticket feed")
        return MockFeed.demo()
    return HttpFeed(FEED_URL)
