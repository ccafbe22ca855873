"""
main.py
========
FastAPI entry point for the pharmacy dispensing dashboard.
It:
 - Builds the dashboard session over the configured ticket feed.
 - Starts / stops polling when the sign-in state changes.
 - Exposes the active and finished buckets page by page.
 - Deletes tickets and builds links to the dispensing screen.
 - Pushes new-patient arrivals to open screens over WebSocket.
"""

import os
from typing import Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from .classifier import BUCKETS
from .dashboard_manager import DashboardSession, SessionState
from .feeds import make_feed
from .notifications import broadcast_arrival, pushover_arrival, register_ws, unregister_ws
from .schemas import SessionStateRequest

# ---------------------------------------------------------------------------
# APP INITIALIZATION
# ---------------------------------------------------------------------------

app = FastAPI(title="Pharmacy Dashboard", version="1.0")

# Allow the dashboard frontend to communicate
app.add_middleware(
    CORSMiddleware,
    allow_origins=[os.getenv("DASHBOARD_CORS_ORIGIN", "http://localhost:4200")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _session() -> DashboardSession:
    return app.state.session


# ---------------------------------------------------------------------------
# APP STARTUP / SHUTDOWN EVENTS
# ---------------------------------------------------------------------------

@app.on_event("startup")
async def startup_event():
    """
    Called when FastAPI starts.
    Builds the session and waits for the sign-in state before polling.
    """
    print("🚀 Starting Pharmacy Dashboard...")
    session = DashboardSession(make_feed())
    session.on_arrival(broadcast_arrival)
    session.on_arrival(pushover_arrival)
    app.state.session = session

    initial_state = os.getenv("DASHBOARD_SESSION_STATE", SessionState.loading.value)
    session.set_session_state(initial_state)


@app.on_event("shutdown")
async def shutdown_event():
    _session().shutdown()


# ---------------------------------------------------------------------------
# API ENDPOINTS
# ---------------------------------------------------------------------------

@app.post("/api/session")
async def api_set_session(req: SessionStateRequest):
    """
    Report the sign-in state.
    Polling runs only while the state is 'ready'.
    """
    try:
        state = SessionState(req.state)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown session state: {req.state}")
    session = _session()
    session.set_session_state(state)
    return {"state": state.value, "polling": session.poller.running}


@app.get("/api/status")
async def api_status():
    """Loading flag, latest error and polling state for the banner."""
    session = _session()
    return {
        "state": session.state.value,
        "loading": session.loading,
        "error": session.current_error,
        "polling": session.poller.running,
    }


@app.get("/api/buckets/{bucket}")
async def api_bucket_page(bucket: str, page: Optional[int] = None):
    """
    One page of today's 'active' or 'finished' tickets.
    Passing ?page=N also makes N the bucket's current page.
    """
    if bucket not in BUCKETS:
        raise HTTPException(status_code=404, detail="Bucket not found")
    session = _session()
    if page is not None:
        try:
            session.go_to_page(bucket, page)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
    return session.active_page(bucket).model_dump(by_alias=True, mode="json")


@app.delete("/api/tickets/{record_id}")
async def api_delete_ticket(record_id: str):
    """Delete a ticket at the feed, then drop it from the dashboard."""
    session = _session()
    if not await session.request_delete(record_id):
        raise HTTPException(status_code=502, detail=session.current_error)
    return {"deleted": record_id}


@app.get("/api/tickets/{record_id}/navigate")
async def api_navigate(record_id: str):
    """Link to the dispensing screen for a ticket."""
    url = _session().request_navigate(record_id)
    if url is None:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return {"url": url}


# ---------------------------------------------------------------------------
# WEBSOCKET ENDPOINT
# ---------------------------------------------------------------------------

@app.websocket("/ws/arrivals")
async def websocket_arrivals(ws: WebSocket):
    """
    WebSocket endpoint for new-patient toasts.
    Dashboard screens connect here to receive arrival events.
    """
    await ws.accept()
    register_ws(ws)
    try:
        while True:
            data = await ws.receive_text()
            await ws.send_text(f"Echo: {data}")
    except WebSocketDisconnect:
        unregister_ws(ws)


# ---------------------------------------------------------------------------
# ROOT ENDPOINT
# ---------------------------------------------------------------------------

@app.get("/")
async def root():
    """Basic health check endpoint."""
    return {"message": "Pharmacy Dashboard is running!"}
