"""
models.py
=========
SQLAlchemy ORM models for the ticket feed service.
Contains the table for:
 - PatientRecord (one check-in waiting for, or done with, dispensing)
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import declarative_base
import datetime
import enum

# SQLAlchemy Base class
Base = declarative_base()

# ---------------------------------------------------------------------------
# ENUM DEFINITIONS
# ---------------------------------------------------------------------------

class TicketStatus(enum.IntEnum):
    """
    Numeric status flag carried on the wire.
    Only `active` is meaningful; every other value means finished.
    """
    finished = 0
    active = 1


# ---------------------------------------------------------------------------
# TABLE DEFINITIONS
# ---------------------------------------------------------------------------

class PatientRecord(Base):
    """Stores a patient check-in and the medicine dispensed for it."""
    __tablename__ = "patient_records"

    patientrecord_id = Column(Integer, primary_key=True)
    patient_name = Column(String, nullable=False)
    patient_id = Column(String, nullable=True)
    role = Column(String, nullable=True)
    datetime = Column(DateTime, default=datetime.datetime.now)
    status = Column(Integer, default=TicketStatus.active.value)
    symptom_names = Column(Text, nullable=True)       # comma-joined
    other_symptoms = Column(Text, nullable=True)      # comma-joined
    pillstock_ids = Column(Text, nullable=True)       # comma-joined, aligned with pill_quantities
    pill_names = Column(Text, nullable=True)          # comma-joined, aligned with pill_quantities
    pill_quantities = Column(Text, nullable=True)     # comma-joined
    unit_type = Column(String, nullable=True)

    def to_wire(self) -> dict:
        """Serialize to the JSON shape served by GET /api/dashboard."""
        return {
            "patientrecord_id": self.patientrecord_id,
            "patient_name": self.patient_name,
            "patient_id": self.patient_id,
            "role": self.role,
            "datetime": self.datetime.isoformat() if self.datetime else None,
            "status": self.status,
            "symptom_names": self.symptom_names,
            "other_symptoms": self.other_symptoms,
            "pillstock_ids": self.pillstock_ids,
            "pill_names": self.pill_names,
            "pill_quantities": self.pill_quantities,
            "unit_type": self.unit_type,
        }
