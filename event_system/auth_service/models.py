"""
User model for the authentication service.

Rows come from the `users` table. The password hash is kept on the object for
login checks but is never part of `to_dict()`.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from event_system.timeutils import iso


@dataclass
class User:
    id: int
    username: str
    email: str
    password_hash: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "User":
        # Participant listings select public columns only
        return cls(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            password_hash=row.get("password") or "",
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "created_at": iso(self.created_at),
        }
