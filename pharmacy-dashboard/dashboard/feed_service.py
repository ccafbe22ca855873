"""
feed_service.py
===============
FastAPI ticket feed: the remote store the dashboard polls.
It:
 - Initializes the database.
 - Serves every patient record for the dashboard (GET /api/dashboard).
 - Deletes a record (DELETE /api/ticket/{id}).
 - Checks patients in and marks them dispensed, so the feed has data to serve.
"""

import datetime

from fastapi import FastAPI, HTTPException

from .db import init_db, SessionLocal
from .models import Base, PatientRecord, TicketStatus
from .schemas import CheckinRequest, DispenseRequest

# ---------------------------------------------------------------------------
# APP INITIALIZATION
# ---------------------------------------------------------------------------

app = FastAPI(title="Pharmacy Ticket Feed", version="1.0")


@app.on_event("startup")
async def startup_event():
    """Create tables if missing."""
    print("🚀 Starting Pharmacy Ticket Feed...")
    init_db(Base)


# ---------------------------------------------------------------------------
# API ENDPOINTS
# ---------------------------------------------------------------------------

@app.get("/api/dashboard")
async def api_dashboard():
    """All patient records, in the wire format the dashboard parses."""
    db = SessionLocal()
    try:
        return [r.to_wire() for r in db.query(PatientRecord).all()]
    finally:
        db.close()


@app.delete("/api/ticket/{record_id}")
async def api_delete_ticket(record_id: int):
    """Delete one patient record."""
    db = SessionLocal()
    try:
        record = db.get(PatientRecord, record_id)
        if not record:
            raise HTTPException(status_code=404, detail="Ticket not found")
        db.delete(record)
        db.commit()
        print(f"🗑️ Ticket {record_id} deleted from feed")
        return {"deleted": record_id}
    finally:
        db.close()


@app.post("/api/patients/checkin")
async def api_checkin(req: CheckinRequest):
    """
    Check a patient in.
    Creates an active record stamped with the current time.
    """
    db = SessionLocal()
    try:
        record = PatientRecord(
            patient_name=req.patient_name,
            patient_id=req.patient_id,
            role=req.role,
            datetime=datetime.datetime.now(),
            status=TicketStatus.active.value,
            symptom_names=req.symptom_names,
            other_symptoms=req.other_symptoms,
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        print(f"📋 Checked in {record.patient_name} as ticket {record.patientrecord_id}")
        return {"patientrecord_id": record.patientrecord_id}
    finally:
        db.close()


@app.post("/api/ticket/{record_id}/dispense")
async def api_dispense(record_id: int, req: DispenseRequest):
    """Record the dispensed medicine and mark the ticket finished."""
    db = SessionLocal()
    try:
        record = db.get(PatientRecord, record_id)
        if not record:
            raise HTTPException(status_code=404, detail="Ticket not found")
        record.pillstock_ids = req.pillstock_ids
        record.pill_names = req.pill_names
        record.pill_quantities = req.pill_quantities
        record.unit_type = req.unit_type
        record.status = TicketStatus.finished.value
        db.commit()
        print(f"💊 Ticket {record_id} dispensed")
        return {"patientrecord_id": record_id, "status": record.status}
    finally:
        db.close()


@app.get("/")
async def root():
    """Basic health check endpoint."""
    return {"message": "Pharmacy Ticket Feed is running!"}
