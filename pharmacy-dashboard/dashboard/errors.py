"""
errors.py
=========
Error types raised by the dashboard synchronization engine.

 - FetchFailure: the periodic pull of the ticket feed failed
 - DeleteFailure: a delete request against the feed failed
 - MalformedRecord: a ticket came back without its identity key
"""


class DashboardError(Exception):
    """Base class for all dashboard engine errors."""


class FetchFailure(DashboardError):
    """Transport error, non-success status or bad body on GET /api/dashboard."""


class DeleteFailure(DashboardError):
    """Transport error or non-success status on DELETE /api/ticket/{id}."""

    def __init__(self, record_id, message: str):
        super().__init__(message)
        self.record_id = record_id


class MalformedRecord(DashboardError):
    """A ticket without a usable patientrecord_id."""

    def __init__(self, record: dict):
        super().__init__(f"Invalid ticket data: {record!r}")
        self.record = record
