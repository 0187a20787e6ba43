"""
Participation routes: join, leave and membership lookups.
Mounted under the same `/events` prefix as the events blueprint.
"""

from typing import Tuple

from flask import Blueprint, Response, jsonify

from event_system.auth_service.utils import current_auth, login_required
from event_system.gateway.container import get_services

participants_bp = Blueprint("participants", __name__)


@participants_bp.route("/<int:event_id>/join", methods=["POST"])
@login_required
def join_event(event_id: int) -> Tuple[Response, int]:
    """
    Join an event as a participant.

    Returns:
        200: Confirmation message.
        400: Event closed, full, already joined, or active-event limit reached.
        401: Authentication failure.
        404: Event not found.
    """
    get_services().participants.join_event(current_auth().user_id, event_id)
    return jsonify({"message": "Successfully joined event"}), 200


@participants_bp.route("/<int:event_id>/leave", methods=["POST"])
@login_required
def leave_event(event_id: int) -> Tuple[Response, int]:
    """
    Leave an event.

    Returns:
        200: Confirmation message.
        401: Authentication failure.
        404: The caller is not a participant.
    """
    get_services().participants.leave_event(current_auth().user_id, event_id)
    return jsonify({"message": "Successfully left event"}), 200


@participants_bp.route("/<int:event_id>/is-participant", methods=["GET"])
@login_required
def is_participant(event_id: int) -> Tuple[Response, int]:
    joined = get_services().participants.is_participant(current_auth().user_id, event_id)
    return jsonify({"is_participant": joined}), 200


@participants_bp.route("/<int:event_id>/participant-count", methods=["GET"])
def participant_count(event_id: int) -> Tuple[Response, int]:
    count = get_services().participants.get_participant_count(event_id)
    return jsonify({"count": count}), 200
