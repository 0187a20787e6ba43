"""
Wiring of repositories and services for one application instance.
"""

from dataclasses import dataclass

from flask import current_app

from event_system.auth_service.repository import UserRepository
from event_system.auth_service.service import AuthService
from event_system.config import Config
from event_system.database.db_connection import Database
from event_system.events_service.repository import EventRepository
from event_system.events_service.service import EventService
from event_system.participants_service.repository import ParticipantRepository
from event_system.participants_service.service import ParticipantService

EXTENSION_KEY = "event_system"


@dataclass
class AppServices:
    config: Config
    db: Database
    auth: AuthService
    events: EventService
    participants: ParticipantService


def build_services(config: Config, db: Database) -> AppServices:
    users = UserRepository(db)
    events = EventRepository(db)
    participants = ParticipantRepository(db)

    return AppServices(
        config=config,
        db=db,
        auth=AuthService(users, config),
        events=EventService(db, events, participants),
        participants=ParticipantService(
            db, participants, events, users, max_active_events=config.max_active_events
        ),
    )


def get_services() -> AppServices:
    """Services of the application handling the current request."""
    return current_app.extensions[EXTENSION_KEY]
