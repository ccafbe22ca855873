"""
navigation.py
=============
Builds the link to the dispensing screen for a ticket.
"""

from urllib.parse import quote, urlencode

from .errors import MalformedRecord
from .schemas import NO_OTHER_SYMPTOMS, NO_SYMPTOMS, Ticket


def navigation_target(ticket: Ticket) -> str:
    """
    /ticket/<id>?patientrecord_id=..&patient_name=..&patient_id=..
    &datetime=..&symptoms=..&other_symptom=.., all URL-encoded.
    """
    if not ticket.has_identity:
        raise MalformedRecord(ticket.model_dump(by_alias=True, mode="json"))

    query = urlencode({
        "patientrecord_id": ticket.id,
        "patient_name": ticket.patient_name,
        "patient_id": ticket.patient_id,
        "datetime": ticket.timestamp.isoformat(),
        "symptoms": ticket.symptoms or NO_SYMPTOMS,
        # the dispensing screen reads the singular key
        "other_symptom": ticket.other_symptoms or NO_OTHER_SYMPTOMS,
    })
    return f"/ticket/{quote(str(ticket.id), safe='')}?{query}"
