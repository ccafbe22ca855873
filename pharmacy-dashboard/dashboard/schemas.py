"""
schemas.py
==========
Pydantic models used for parsing the ticket feed, validating incoming
requests and structuring outgoing API responses.
"""

from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import FetchFailure, MalformedRecord
from .models import TicketStatus

UNKNOWN = "Unknown"
NO_SYMPTOMS = "No symptoms recorded"
NO_OTHER_SYMPTOMS = "No other symptoms"


def _split(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [part.strip() for part in text.split(",")]


class PillRow(BaseModel):
    """One line of the dispensing record table."""
    lot_id: str
    pill_name: str
    quantity: str
    unit: str


class Ticket(BaseModel):
    """
    One patient service request as served by GET /api/dashboard.
    Field aliases are the wire names; the Python names are what the
    engine uses.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Optional[Union[int, str]] = Field(default=None, alias="patientrecord_id")
    patient_name: str = UNKNOWN
    patient_id: str = UNKNOWN
    role: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now, alias="datetime")
    status: Any = None
    symptoms: Optional[str] = Field(default=None, alias="symptom_names")
    other_symptoms: Optional[str] = None
    pill_lot_ids: Optional[str] = Field(default=None, alias="pillstock_ids")
    pill_names: Optional[str] = None
    pill_quantities: Optional[str] = None
    unit_type: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _blank_id_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("patient_name", "patient_id", mode="before")
    @classmethod
    def _display_text(cls, value):
        if value is None or value == "":
            return UNKNOWN
        return str(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _default_now(cls, value):
        return datetime.now() if value is None or value == "" else value

    @field_validator("timestamp")
    @classmethod
    def _to_local_clock(cls, value: datetime) -> datetime:
        # Day windows are computed on the local clock, so aware values
        # are converted to local time and made naive.
        if value.tzinfo is not None:
            try:
                return value.astimezone().replace(tzinfo=None)
            except OverflowError as e:
                raise ValueError(f"timestamp out of range on the local clock: {e}")
        return value

    @field_validator(
        "symptoms", "other_symptoms", "pill_lot_ids",
        "pill_names", "pill_quantities", "unit_type", mode="before",
    )
    @classmethod
    def _list_text(cls, value):
        if isinstance(value, (int, float)):
            return str(value)
        return value

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def has_identity(self) -> bool:
        return self.id is not None

    @property
    def is_active(self) -> bool:
        # Only the number 1 is active; "1", 1.5, True and null are finished.
        if isinstance(self.status, bool) or not isinstance(self.status, (int, float)):
            return False
        return self.status == TicketStatus.active

    def symptom_list(self) -> List[str]:
        """Symptoms for display, or the 'none recorded' placeholder."""
        items = [s for s in _split(self.symptoms) if s]
        return items or [NO_SYMPTOMS]

    def other_symptom_list(self) -> List[str]:
        return [s for s in _split(self.other_symptoms) if s]

    def pill_rows(self) -> List[PillRow]:
        """
        Zip the parallel pill lists into rows, one per quantity entry.
        A shorter lot-id or name list yields UNKNOWN at the missing index.
        """
        lot_ids = _split(self.pill_lot_ids)
        names = _split(self.pill_names)
        rows = []
        for index, quantity in enumerate(_split(self.pill_quantities)):
            rows.append(PillRow(
                lot_id=lot_ids[index] if index < len(lot_ids) else UNKNOWN,
                pill_name=names[index] if index < len(names) else UNKNOWN,
                quantity=quantity,
                unit=self.unit_type or "",
            ))
        return rows


def parse_tickets(payload: Any) -> List[Ticket]:
    """
    Validate a GET /api/dashboard body into tickets.

    A non-list body is a FetchFailure. Entries that fail validation are
    dropped with a warning; entries without an id are kept for read-only
    listing but reported as malformed.
    """
    if not isinstance(payload, list):
        raise FetchFailure(f"Expected a JSON array of tickets, got {type(payload).__name__}")

    tickets = []
    seen_ids = set()
    for item in payload:
        if not isinstance(item, dict):
            print(f"⚠️ Skipping non-object ticket entry: {item!r}")
            continue
        try:
            ticket = Ticket.model_validate(item)
        except ValidationError as e:
            print(f"⚠️ Skipping unparseable ticket {item.get('patientrecord_id')!r}: {e}")
            continue
        if not ticket.has_identity:
            print(f"⚠️ {MalformedRecord(item)}")
        elif str(ticket.id) in seen_ids:
            print(f"⚠️ Duplicate patientrecord_id {ticket.id!r} in feed")
        else:
            seen_ids.add(str(ticket.id))
        tickets.append(ticket)
    return tickets


def format_checkin_time(value: datetime) -> str:
    """Two-line check-in time shown in the finished-ticket details."""
    return f"{value.day} {value.strftime('%B')} {value.year}\nTime {value:%H:%M}"


# ---------------------------------------------------------------------------
# API request / response bodies
# ---------------------------------------------------------------------------

class CheckinRequest(BaseModel):
    """Request body for checking a patient in at the feed service."""
    patient_name: str
    patient_id: Optional[str] = None
    role: Optional[str] = None
    symptom_names: Optional[str] = None
    other_symptoms: Optional[str] = None


class DispenseRequest(BaseModel):
    """Medicine handed out for a ticket, as parallel comma-joined lists."""
    pillstock_ids: Optional[str] = None
    pill_names: Optional[str] = None
    pill_quantities: Optional[str] = None
    unit_type: Optional[str] = None


class SessionStateRequest(BaseModel):
    """Request body telling the dashboard the sign-in state."""
    state: str


class PageView(BaseModel):
    """One page of a bucket as handed to the presentation layer."""
    bucket: str
    page: int
    total_pages: int
    items: List[Ticket]
