"""
Events routes: create, read, update, delete, open/close, and listings.
Handles event lifecycle management; participation lives in
`participants_service`.
"""

from typing import Tuple

from flask import Blueprint, Response, jsonify

from event_system.auth_service.utils import current_auth, login_required
from event_system.events_service.models import EventRequest
from event_system.gateway.container import get_services
from event_system.validation import json_body

events_bp = Blueprint("events", __name__)


@events_bp.route("", methods=["POST"])
@events_bp.route("/", methods=["POST"])
@login_required
def create_event() -> Tuple[Response, int]:
    """
    Create an event owned by the caller.

    Expects JSON: name, description, location, start_time, end_time, capacity.

    Returns:
        201: Event object (status "open").
        400: Validation error.
        401: Authentication failure.
    """
    req = EventRequest.from_json(json_body())
    event = get_services().events.create_event(req, current_auth().user_id)
    return jsonify(event.to_dict()), 201


@events_bp.route("/public", methods=["GET"])
def list_public_events() -> Tuple[Response, int]:
    """
    Return all open events ordered by start time (earliest first).

    Returns:
        200: List of event objects.
    """
    events = get_services().events.list_public_events()
    return jsonify([e.to_dict() for e in events]), 200


@events_bp.route("/<int:event_id>", methods=["GET"])
def get_event(event_id: int) -> Tuple[Response, int]:
    """
    Get a single event by ID.

    Returns:
        200: Event object.
        404: Event not found.
    """
    event = get_services().events.get_event(event_id)
    return jsonify(event.to_dict()), 200


@events_bp.route("/<int:event_id>", methods=["PUT"])
@login_required
def update_event(event_id: int) -> Tuple[Response, int]:
    """
    Update an event. The full set of editable fields is required.

    Permission:
    - The organizer of the event only.

    Returns:
        200: Updated event.
        400: Validation error.
        401: Authentication failure.
        403: Caller is not the organizer.
        404: Event not found.
    """
    req = EventRequest.from_json(json_body())
    event = get_services().events.update_event(event_id, req, current_auth().user_id)
    return jsonify(event.to_dict()), 200


@events_bp.route("/<int:event_id>/close", methods=["POST"])
@login_required
def close_event(event_id: int) -> Tuple[Response, int]:
    """
    Stop accepting participants.

    Returns:
        200: Updated event.
        400: Event already closed.
        403: Caller is not the organizer.
        404: Event not found.
    """
    event = get_services().events.close_event(current_auth().user_id, event_id)
    return jsonify(event.to_dict()), 200


@events_bp.route("/<int:event_id>/open", methods=["POST"])
@login_required
def open_event(event_id: int) -> Tuple[Response, int]:
    """
    Re-open a closed event.

    Returns:
        200: Updated event.
        400: Event already open.
        403: Caller is not the organizer.
        404: Event not found.
    """
    event = get_services().events.open_event(current_auth().user_id, event_id)
    return jsonify(event.to_dict()), 200


@events_bp.route("/<int:event_id>", methods=["DELETE"])
@login_required
def delete_event(event_id: int) -> Tuple[Response, int]:
    """
    Delete an event if the caller is the organizer and nobody has joined.

    Returns:
        200: Confirmation message.
        400: Event still has participants.
        403: Caller is not the organizer.
        404: Event not found.
    """
    get_services().events.delete_event(event_id, current_auth().user_id)
    return jsonify({"message": "Event deleted successfully"}), 200


@events_bp.route("/my", methods=["GET"], strict_slashes=False)
@login_required
def list_my_events() -> Tuple[Response, int]:
    """
    Events organized by the caller, ordered by start time.
    """
    events = get_services().events.list_events_by_organizer(current_auth().user_id)
    return jsonify([e.to_dict() for e in events]), 200


@events_bp.route("/participating", methods=["GET"], strict_slashes=False)
@login_required
def list_participating_events() -> Tuple[Response, int]:
    """
    Events the caller has joined, ordered by start time.
    """
    events = get_services().events.list_events_by_participant(current_auth().user_id)
    return jsonify([e.to_dict() for e in events]), 200


@events_bp.route("/<int:event_id>/participants", methods=["GET"])
@login_required
def get_event_with_participants(event_id: int) -> Tuple[Response, int]:
    """
    Get an event together with the users who joined it.
    Restricted to the event organizer.

    Returns:
        200: {"event": {...}, "participants": [user, ...]}
        403: Caller is not the organizer.
        404: Event not found.
    """
    result = get_services().events.get_event_with_participants(event_id, current_auth().user_id)
    return jsonify(result), 200
