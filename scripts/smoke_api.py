"""
Quick API walkthrough against a running server.
Covers: register, login, create event, join, capacity guard, close, leave, delete.

Start the server first (`python -m event_system.gateway.server`), then:

    python scripts/smoke_api.py
"""

import os
import uuid
from datetime import datetime, timedelta, timezone

import requests

BASE = os.getenv("API_BASE", "http://localhost:8080/api")
SUFFIX = uuid.uuid4().hex[:8]


def show(label, r):
    print(f"{label}:", r.status_code, r.json())
    return r.json()


def register(name):
    r = requests.post(f"{BASE}/auth/register", json={
        "username": f"{name}_{SUFFIX}",
        "email": f"{name}_{SUFFIX}@example.com",
        "password": "pass123",
    })
    body = show(f"REGISTER {name}", r)
    return {"Authorization": f"Bearer {body['token']}"}


organizer = register("organizer")
alice = register("alice")
bob = register("bob")

# Login with the same credentials
r = requests.post(f"{BASE}/auth/login", json={
    "email": f"organizer_{SUFFIX}@example.com",
    "password": "pass123",
})
show("LOGIN", r)

start = datetime.now(timezone.utc) + timedelta(days=7)
r = requests.post(f"{BASE}/events", json={
    "name": "Smoke Test Meetup",
    "description": "Simple test",
    "location": "Room 101",
    "start_time": start.isoformat(),
    "end_time": (start + timedelta(hours=2)).isoformat(),
    "capacity": 1,
}, headers=organizer)
event_id = show("CREATE EVENT", r)["id"]

show("JOIN alice", requests.post(f"{BASE}/events/{event_id}/join", headers=alice))
show("JOIN bob (expect full)", requests.post(f"{BASE}/events/{event_id}/join", headers=bob))
show("COUNT", requests.get(f"{BASE}/events/{event_id}/participant-count"))
show("PARTICIPANTS", requests.get(f"{BASE}/events/{event_id}/participants", headers=organizer))

show("CLOSE", requests.post(f"{BASE}/events/{event_id}/close", headers=organizer))
show("PUBLIC LIST", requests.get(f"{BASE}/events/public"))

show("DELETE (expect conflict)", requests.delete(f"{BASE}/events/{event_id}", headers=organizer))
show("LEAVE alice", requests.post(f"{BASE}/events/{event_id}/leave", headers=alice))
show("DELETE", requests.delete(f"{BASE}/events/{event_id}", headers=organizer))
