"""
Event business logic: ownership checks, open/closed transitions and
deletion rules.
"""

import logging
from typing import Any, Dict, List

from event_system.database.db_connection import Database
from event_system.errors import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from event_system.events_service.models import Event, EventRequest, STATUS_CLOSED, STATUS_OPEN
from event_system.events_service.repository import EventRepository
from event_system.participants_service.repository import ParticipantRepository

NOT_ORGANIZER = "you are not the organizer of this event"
EVENT_NOT_FOUND = "event not found"


class EventService:
    def __init__(self, db: Database, events: EventRepository, participants: ParticipantRepository) -> None:
        self.db = db
        self.events = events
        self.participants = participants

    def create_event(self, req: EventRequest, organizer_id: int) -> Event:
        event = self.events.create(req, organizer_id)
        logging.info(f"[Events] User {organizer_id} created event {event.id}")
        return event

    def get_event(self, event_id: int) -> Event:
        event = self.events.get_by_id(event_id)
        if event is None:
            raise NotFoundError(EVENT_NOT_FOUND)
        return event

    def update_event(self, event_id: int, req: EventRequest, user_id: int) -> Event:
        """
        Replace name, description, location, time window and capacity.

        Raises:
            NotFoundError: No such event.
            ForbiddenError: Caller is not the organizer.
            ValidationError: New capacity is below the current participant count.
        """
        with self.db.transaction() as conn:
            self._owned_event(event_id, user_id, conn)

            joined = self.participants.count_for_event(event_id, conn=conn)
            if req.capacity < joined:
                raise ValidationError(
                    f"capacity cannot be lower than the current participant count ({joined})"
                )

            updated = self.events.update(event_id, user_id, req, conn=conn)

        if updated is None:
            raise NotFoundError(EVENT_NOT_FOUND)
        return updated

    def close_event(self, user_id: int, event_id: int) -> Event:
        return self._transition(user_id, event_id, STATUS_CLOSED)

    def open_event(self, user_id: int, event_id: int) -> Event:
        return self._transition(user_id, event_id, STATUS_OPEN)

    def delete_event(self, event_id: int, user_id: int) -> None:
        """
        Remove an event that nobody has joined.

        The event row stays locked while participants are counted, so a
        concurrent join cannot sneak in between the check and the delete.

        Raises:
            NotFoundError: No such event.
            ConflictError: The event still has participants.
            ForbiddenError: Caller is not the organizer.
        """
        with self.db.transaction() as conn:
            event = self.events.get_by_id(event_id, conn=conn, for_update=True)
            if event is None:
                raise NotFoundError(EVENT_NOT_FOUND)

            if self.participants.count_for_event(event_id, conn=conn) > 0:
                raise ConflictError("cannot delete event with participants")

            if event.organizer_id != user_id:
                raise ForbiddenError(NOT_ORGANIZER)

            self.events.delete(event_id, user_id, conn=conn)

        logging.info(f"[Events] User {user_id} deleted event {event_id}")

    def list_public_events(self) -> List[Event]:
        return self.events.list_open()

    def list_events_by_organizer(self, organizer_id: int) -> List[Event]:
        return self.events.list_by_organizer(organizer_id)

    def list_events_by_participant(self, user_id: int) -> List[Event]:
        return self.events.list_by_participant(user_id)

    def get_event_with_participants(self, event_id: int, user_id: int) -> Dict[str, Any]:
        event = self.get_event(event_id)
        if event.organizer_id != user_id:
            raise ForbiddenError(NOT_ORGANIZER)

        participants = self.events.list_participants(event_id)
        return {
            "event": event.to_dict(),
            "participants": [p.to_dict() for p in participants],
        }

    def _owned_event(self, event_id: int, user_id: int, conn) -> Event:
        event = self.events.get_by_id(event_id, conn=conn, for_update=True)
        if event is None:
            raise NotFoundError(EVENT_NOT_FOUND)
        if event.organizer_id != user_id:
            raise ForbiddenError(NOT_ORGANIZER)
        return event

    def _transition(self, user_id: int, event_id: int, target: str) -> Event:
        with self.db.transaction() as conn:
            event = self._owned_event(event_id, user_id, conn)
            if event.status == target:
                raise InvalidStateError(f"event is already {target}")
            updated = self.events.set_status(event_id, user_id, target, conn=conn)

        if updated is None:
            raise NotFoundError(EVENT_NOT_FOUND)
        logging.info(f"[Events] Event {event_id} is now {target}")
        return updated
