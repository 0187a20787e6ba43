"""
Participant (join record) model.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from event_system.timeutils import iso


@dataclass
class Participant:
    id: int
    user_id: int
    event_id: int
    joined_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Participant":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            event_id=row["event_id"],
            joined_at=row["joined_at"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "event_id": self.event_id,
            "joined_at": iso(self.joined_at),
        }
