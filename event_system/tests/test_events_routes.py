from datetime import timedelta

from event_system.timeutils import parse_dt, utcnow


def test_create_event_success(client, register, event_payload):
    headers, user = register("organizer")

    response = client.post("/api/events", json=event_payload(capacity=3), headers=headers)

    assert response.status_code == 201
    data = response.get_json()
    assert data["name"] == "Team Meetup"
    assert data["capacity"] == 3
    assert data["organizer_id"] == user["id"]
    assert data["status"] == "open"


def test_create_event_trailing_slash(client, register, event_payload):
    headers, _ = register("organizer")
    response = client.post("/api/events/", json=event_payload(), headers=headers)
    assert response.status_code == 201


def test_create_event_requires_auth(client, event_payload):
    response = client.post("/api/events", json=event_payload())
    assert response.status_code == 401


def test_create_event_invalid_input(client, register, event_payload):
    headers, _ = register("organizer")
    start = utcnow() + timedelta(days=1)

    cases = [
        {"name": ""},
        {"capacity": 0},
        {"capacity": -4},
        {"capacity": "10"},
        {"capacity": True},
        {"start_time": "next tuesday"},
        {"start_time": start.isoformat(), "end_time": start.isoformat()},
        {"start_time": start.isoformat(), "end_time": (start - timedelta(hours=1)).isoformat()},
        {"name": "x" * 101},
    ]
    for overrides in cases:
        response = client.post("/api/events", json=event_payload(**overrides), headers=headers)
        assert response.status_code == 400, overrides
        assert response.get_json()["code"] == "validation_error"


def test_create_event_missing_fields(client, register):
    headers, _ = register("organizer")
    response = client.post("/api/events", json={"name": "New Event"}, headers=headers)
    assert response.status_code == 400
    assert "required" in response.get_json()["message"]


def test_naive_times_are_taken_as_utc(client, register, event_payload):
    headers, _ = register("organizer")
    response = client.post("/api/events", json=event_payload(
        start_time="2031-05-01T10:00:00",
        end_time="2031-05-01T12:00:00",
    ), headers=headers)

    assert response.status_code == 201
    assert parse_dt(response.get_json()["start_time"]).utcoffset() == timedelta(0)


def test_get_event(client, register, create_event):
    headers, _ = register("organizer")
    event = create_event(headers)

    response = client.get(f"/api/events/{event['id']}")

    assert response.status_code == 200
    assert response.get_json()["name"] == "Team Meetup"


def test_get_event_not_found(client):
    response = client.get("/api/events/999")
    assert response.status_code == 404
    assert response.get_json()["code"] == "not_found"


def test_list_public_events_only_open_and_sorted(client, register, create_event):
    headers, _ = register("organizer")
    now = utcnow()
    later = create_event(headers, name="Later",
                         start_time=(now + timedelta(days=3)).isoformat(),
                         end_time=(now + timedelta(days=3, hours=1)).isoformat())
    sooner = create_event(headers, name="Sooner",
                          start_time=(now + timedelta(days=1)).isoformat(),
                          end_time=(now + timedelta(days=1, hours=1)).isoformat())
    closed = create_event(headers, name="Closed")
    client.post(f"/api/events/{closed['id']}/close", headers=headers)

    response = client.get("/api/events/public")

    assert response.status_code == 200
    ids = [e["id"] for e in response.get_json()]
    assert ids == [sooner["id"], later["id"]]


def test_update_event_by_organizer(client, register, create_event, event_payload):
    headers, _ = register("organizer")
    event = create_event(headers)

    response = client.put(
        f"/api/events/{event['id']}",
        json=event_payload(name="Renamed", capacity=20),
        headers=headers,
    )

    assert response.status_code == 200
    data = response.get_json()
    assert data["name"] == "Renamed"
    assert data["capacity"] == 20
    assert data["status"] == "open"


def test_update_event_keeps_status(client, register, create_event, event_payload):
    headers, _ = register("organizer")
    event = create_event(headers)
    client.post(f"/api/events/{event['id']}/close", headers=headers)

    response = client.put(f"/api/events/{event['id']}", json=event_payload(), headers=headers)

    assert response.status_code == 200
    assert response.get_json()["status"] == "closed"


def test_non_organizer_cannot_mutate(client, register, create_event, event_payload):
    owner_headers, _ = register("organizer")
    other_headers, _ = register("intruder")
    event = create_event(owner_headers)
    event_id = event["id"]

    update = client.put(f"/api/events/{event_id}", json=event_payload(), headers=other_headers)
    bad_update = client.put(f"/api/events/{event_id}", json={}, headers=other_headers)
    close = client.post(f"/api/events/{event_id}/close", headers=other_headers)
    delete = client.delete(f"/api/events/{event_id}", headers=other_headers)

    assert update.status_code == 403
    assert bad_update.status_code >= 400
    assert close.status_code == 403
    assert delete.status_code == 403

    client.post(f"/api/events/{event_id}/close", headers=owner_headers)
    reopen = client.post(f"/api/events/{event_id}/open", headers=other_headers)
    assert reopen.status_code == 403

    # Nothing changed
    data = client.get(f"/api/events/{event_id}").get_json()
    assert data["name"] == "Team Meetup"
    assert data["status"] == "closed"


def test_update_missing_event(client, register, event_payload):
    headers, _ = register("organizer")
    response = client.put("/api/events/999", json=event_payload(), headers=headers)
    assert response.status_code == 404


def test_update_cannot_drop_capacity_below_participants(client, register, create_event, event_payload):
    owner_headers, _ = register("organizer")
    event = create_event(owner_headers, capacity=3)
    for name in ("bob", "carol"):
        headers, _ = register(name)
        assert client.post(f"/api/events/{event['id']}/join", headers=headers).status_code == 200

    response = client.put(
        f"/api/events/{event['id']}", json=event_payload(capacity=1), headers=owner_headers
    )

    assert response.status_code == 400
    assert response.get_json()["code"] == "validation_error"


def test_close_and_open_transitions(client, register, create_event):
    headers, _ = register("organizer")
    event = create_event(headers)
    event_id = event["id"]

    reopen_open = client.post(f"/api/events/{event_id}/open", headers=headers)
    assert reopen_open.status_code == 400
    assert reopen_open.get_json()["code"] == "invalid_state"

    closed = client.post(f"/api/events/{event_id}/close", headers=headers)
    assert closed.status_code == 200
    assert closed.get_json()["status"] == "closed"

    close_again = client.post(f"/api/events/{event_id}/close", headers=headers)
    assert close_again.status_code == 400
    assert close_again.get_json()["message"] == "event is already closed"

    opened = client.post(f"/api/events/{event_id}/open", headers=headers)
    assert opened.status_code == 200
    assert opened.get_json()["status"] == "open"


def test_delete_event_with_participants_fails(client, register, create_event):
    owner_headers, _ = register("organizer")
    bob_headers, _ = register("bob")
    event = create_event(owner_headers)
    client.post(f"/api/events/{event['id']}/join", headers=bob_headers)

    response = client.delete(f"/api/events/{event['id']}", headers=owner_headers)

    assert response.status_code == 400
    assert response.get_json()["code"] == "conflict"
    assert client.get(f"/api/events/{event['id']}").status_code == 200


def test_delete_event_success(client, register, create_event):
    headers, _ = register("organizer")
    event = create_event(headers)

    response = client.delete(f"/api/events/{event['id']}", headers=headers)

    assert response.status_code == 200
    assert response.get_json()["message"] == "Event deleted successfully"
    assert client.get(f"/api/events/{event['id']}").status_code == 404


def test_delete_missing_event(client, register):
    headers, _ = register("organizer")
    assert client.delete("/api/events/999", headers=headers).status_code == 404


def test_my_events(client, register, create_event):
    alice_headers, _ = register("alice")
    bob_headers, _ = register("bob")
    mine = create_event(alice_headers, name="Alice's")
    create_event(bob_headers, name="Bob's")

    for path in ("/api/events/my", "/api/events/my/"):
        response = client.get(path, headers=alice_headers)
        assert response.status_code == 200
        assert [e["id"] for e in response.get_json()] == [mine["id"]]


def test_participating_events(client, register, create_event):
    owner_headers, _ = register("organizer")
    bob_headers, _ = register("bob")
    joined = create_event(owner_headers, name="Joined")
    create_event(owner_headers, name="Skipped")
    client.post(f"/api/events/{joined['id']}/join", headers=bob_headers)

    response = client.get("/api/events/participating", headers=bob_headers)

    assert response.status_code == 200
    assert [e["name"] for e in response.get_json()] == ["Joined"]


def test_listings_require_auth(client):
    assert client.get("/api/events/my").status_code == 401
    assert client.get("/api/events/participating").status_code == 401


def test_event_with_participants(client, register, create_event):
    owner_headers, _ = register("organizer")
    bob_headers, bob = register("bob")
    event = create_event(owner_headers)
    client.post(f"/api/events/{event['id']}/join", headers=bob_headers)

    response = client.get(f"/api/events/{event['id']}/participants", headers=owner_headers)

    assert response.status_code == 200
    data = response.get_json()
    assert data["event"]["id"] == event["id"]
    assert [p["username"] for p in data["participants"]] == ["bob"]
    assert "password" not in data["participants"][0]

    forbidden = client.get(f"/api/events/{event['id']}/participants", headers=bob_headers)
    assert forbidden.status_code == 403


def test_unknown_route_returns_json(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.get_json()["error"] is True


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}
    assert client.get("/").get_json() == {"status": "gateway_ok"}
