"""
notifications.py
=================
Arrival notifications for the pharmacy staff:
 - Pushover push to a configured device
 - WebSocket fan-out to open dashboard screens
"""

import asyncio
import os
from typing import List

import requests
from fastapi import WebSocket

from .schemas import Ticket

# Open dashboard screens listening for arrivals
connected_clients: List[WebSocket] = []

ARRIVAL_TITLE = "New patient"

# ---------------------------------------------------------------------------
# Pushover Notification (optional)
# ---------------------------------------------------------------------------

PUSHOVER_URL = "https://api.pushover.net/1/messages.json"


def push_arrival(ticket: Ticket, http=requests) -> bool:
    """
    Push 'New patient' with the patient's name to the Pushover device in
    PUSHOVER_USER. Returns True only when Pushover accepted the message.
    """
    user_key = os.getenv("PUSHOVER_USER")
    token = os.getenv("PUSHOVER_TOKEN")
    if not user_key:
        return False
    if not token:
        print("⚠️  Pushover token not configured, skipping arrival push.")
        return False

    form = {
        "token": token,
        "user": user_key,
        "title": ARRIVAL_TITLE,
        "message": f"Name: {ticket.patient_name}",
    }
    try:
        resp = http.post(PUSHOVER_URL, data=form, timeout=5)
    except requests.RequestException as e:
        print(f"❌ Pushover push for ticket {ticket.id!r} failed: {e}")
        return False
    if resp.status_code != 200:
        print(f"❌ Pushover rejected arrival push ({resp.status_code}): {resp.text}")
        return False
    return True


async def pushover_arrival(ticket: Ticket):
    """Arrival observer: runs the blocking push off the event loop."""
    await asyncio.to_thread(push_arrival, ticket)

# ---------------------------------------------------------------------------
# WebSocket Registry
# ---------------------------------------------------------------------------

def register_ws(ws: WebSocket):
    """Register a dashboard screen's WebSocket connection."""
    connected_clients.append(ws)
    print(f"🖥️ Dashboard client connected ({len(connected_clients)} active).")


def unregister_ws(ws: WebSocket):
    """Unregister a WebSocket connection when disconnected."""
    if ws in connected_clients:
        connected_clients.remove(ws)
    print(f"❌ Dashboard client disconnected. Remaining sockets: {len(connected_clients)}")


async def broadcast(data: dict):
    """Send a JSON message to all open dashboard screens."""
    for ws in list(connected_clients):
        try:
            await ws.send_json(data)
        except Exception as e:
            print(f"⚠️ Failed to send WS message to dashboard client: {e}")


async def broadcast_arrival(ticket: Ticket):
    """Arrival observer: tell every open screen to show the new-patient toast."""
    await broadcast({
        "event": "ticket_arrived",
        "patientrecord_id": ticket.id,
        "patient_name": ticket.patient_name,
    })
