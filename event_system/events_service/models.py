"""
Event model and the validated create/update payload.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from event_system.errors import ValidationError
from event_system.timeutils import iso, parse_dt
from event_system.validation import string_field

STATUS_OPEN = "open"
STATUS_CLOSED = "closed"

# --- CONSTANTS FOR VALIDATION ---
NAME_MAX_LENGTH = 100
LOCATION_MAX_LENGTH = 255


@dataclass
class Event:
    id: int
    name: str
    description: str
    location: str
    start_time: datetime
    end_time: datetime
    capacity: int
    organizer_id: int
    status: str = STATUS_OPEN
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Event":
        return cls(
            id=row["id"],
            name=row["name"],
            description=row["description"] or "",
            location=row["location"] or "",
            start_time=row["start_time"],
            end_time=row["end_time"],
            capacity=row["capacity"],
            organizer_id=row["organizer_id"],
            status=row["status"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @property
    def is_open(self) -> bool:
        return self.status == STATUS_OPEN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "location": self.location,
            "start_time": iso(self.start_time),
            "end_time": iso(self.end_time),
            "capacity": self.capacity,
            "organizer_id": self.organizer_id,
            "status": self.status,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }


@dataclass(frozen=True)
class EventRequest:
    """Fields a client may set when creating or updating an event."""
    name: str
    description: str
    location: str
    start_time: datetime
    end_time: datetime
    capacity: int

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "EventRequest":
        """
        Validate a create/update body.

        Validations:
        - name, start_time, end_time and capacity are required.
        - Time consistency (start < end).
        - capacity is a positive integer.
        - Length limits matching the table columns.

        Raises:
            ValidationError: On any missing or malformed field.
        """
        name = string_field(data, "name").strip()
        description = string_field(data, "description")
        location = string_field(data, "location").strip()
        start_str = data.get("start_time")
        end_str = data.get("end_time")
        capacity = data.get("capacity")

        if not name or not start_str or not end_str or capacity is None:
            raise ValidationError("Name, start time, end time, and capacity are required")

        if len(name) > NAME_MAX_LENGTH:
            raise ValidationError(f"Name must be {NAME_MAX_LENGTH} characters or less")
        if len(location) > LOCATION_MAX_LENGTH:
            raise ValidationError(f"Location must be {LOCATION_MAX_LENGTH} characters or less")

        # bool is an int subclass; reject it explicitly
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ValidationError("Capacity must be a positive integer")

        start_dt = parse_dt(start_str)
        end_dt = parse_dt(end_str)
        if not start_dt or not end_dt:
            raise ValidationError("Invalid datetime format. Use ISO-8601.")
        if end_dt <= start_dt:
            raise ValidationError("End time must be after start time")

        return cls(
            name=name,
            description=description,
            location=location,
            start_time=start_dt,
            end_time=end_dt,
            capacity=capacity,
        )
