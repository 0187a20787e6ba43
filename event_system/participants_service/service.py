"""
Join/leave rules for event participation.
"""

import logging

import psycopg2.errors

from event_system.auth_service.repository import UserRepository
from event_system.database.db_connection import Database
from event_system.errors import (
    CapacityExceededError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    QuotaExceededError,
)
from event_system.events_service.repository import EventRepository
from event_system.participants_service.models import Participant
from event_system.participants_service.repository import ParticipantRepository
from event_system.timeutils import utcnow

ALREADY_JOINED = "user is already a participant of this event"


class ParticipantService:
    def __init__(
        self,
        db: Database,
        participants: ParticipantRepository,
        events: EventRepository,
        users: UserRepository,
        max_active_events: int = 5,
    ) -> None:
        self.db = db
        self.participants = participants
        self.events = events
        self.users = users
        self.max_active_events = max_active_events

    def join_event(self, user_id: int, event_id: int) -> Participant:
        """
        Add the user to the event.

        Guards run in this order and stop at the first failure:
          1. event exists
          2. event is open
          3. event is not full
          4. user has not joined already
          5. user is in fewer than `max_active_events` events that have not ended

        Everything happens in one transaction holding row locks on the user
        and the event (always in that order), so concurrent joins for the
        same event or by the same user are serialized.

        Raises:
            NotFoundError, InvalidStateError, CapacityExceededError,
            ConflictError, QuotaExceededError
        """
        with self.db.transaction() as conn:
            if not self.users.lock(user_id, conn):
                raise NotFoundError("user not found")

            event = self.events.get_by_id(event_id, conn=conn, for_update=True)
            if event is None:
                raise NotFoundError("event not found")

            if not event.is_open:
                raise InvalidStateError("event is not open for registration")

            if self.participants.count_for_event(event_id, conn=conn) >= event.capacity:
                raise CapacityExceededError("event is at full capacity")

            if self.participants.exists(user_id, event_id, conn=conn):
                raise ConflictError(ALREADY_JOINED)

            now = utcnow()
            active = self.participants.count_active_for_user(user_id, now, conn=conn)
            if active >= self.max_active_events:
                raise QuotaExceededError(
                    "user has reached the maximum number of active events"
                )

            try:
                participant = self.participants.create(user_id, event_id, now, conn=conn)
            except psycopg2.errors.UniqueViolation:
                raise ConflictError(ALREADY_JOINED)

        logging.info(f"[Participants] User {user_id} joined event {event_id}")
        return participant

    def leave_event(self, user_id: int, event_id: int) -> None:
        """
        Raises:
            NotFoundError: The user is not a participant of the event.
        """
        if not self.participants.delete(user_id, event_id):
            raise NotFoundError("user is not a participant of this event")
        logging.info(f"[Participants] User {user_id} left event {event_id}")

    def is_participant(self, user_id: int, event_id: int) -> bool:
        return self.participants.exists(user_id, event_id)

    def get_participant_count(self, event_id: int) -> int:
        return self.participants.count_for_event(event_id)
