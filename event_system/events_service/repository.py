"""
Data access for the `events` table.
"""

from typing import List, Optional

from event_system.auth_service.models import User
from event_system.database.repository import BaseRepository
from event_system.events_service.models import Event, EventRequest, STATUS_OPEN

EVENT_COLUMNS = (
    "id, name, description, location, start_time, end_time, "
    "capacity, organizer_id, status, created_at, updated_at"
)


class EventRepository(BaseRepository):

    def create(self, req: EventRequest, organizer_id: int, conn=None) -> Event:
        sql = f"""
            INSERT INTO events (
                name, description, location, start_time, end_time,
                capacity, organizer_id, status
            ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {EVENT_COLUMNS};
        """
        with self._cursor(conn) as cur:
            cur.execute(sql, (
                req.name, req.description, req.location,
                req.start_time, req.end_time,
                req.capacity, organizer_id, STATUS_OPEN,
            ))
            return Event.from_row(cur.fetchone())

    def get_by_id(self, event_id: int, conn=None, for_update: bool = False) -> Optional[Event]:
        """
        Fetch one event.

        Args:
            for_update (bool): Lock the row until `conn`'s transaction ends.
                Only meaningful together with `conn`.
        """
        sql = f"SELECT {EVENT_COLUMNS} FROM events WHERE id = %s"
        if for_update:
            sql += " FOR UPDATE"
        with self._cursor(conn) as cur:
            cur.execute(sql + ";", (event_id,))
            row = cur.fetchone()
        return Event.from_row(row) if row else None

    def update(self, event_id: int, organizer_id: int, req: EventRequest, conn=None) -> Optional[Event]:
        """
        Overwrite the editable fields; status is left alone.

        Returns:
            Event: The updated row, or None if no row matched id and organizer.
        """
        sql = f"""
            UPDATE events
            SET name = %s, description = %s, location = %s,
                start_time = %s, end_time = %s, capacity = %s,
                updated_at = CURRENT_TIMESTAMP
            WHERE id = %s AND organizer_id = %s
            RETURNING {EVENT_COLUMNS};
        """
        with self._cursor(conn) as cur:
            cur.execute(sql, (
                req.name, req.description, req.location,
                req.start_time, req.end_time, req.capacity,
                event_id, organizer_id,
            ))
            row = cur.fetchone()
        return Event.from_row(row) if row else None

    def set_status(self, event_id: int, organizer_id: int, status: str, conn=None) -> Optional[Event]:
        sql = f"""
            UPDATE events
            SET status = %s, updated_at = CURRENT_TIMESTAMP
            WHERE id = %s AND organizer_id = %s
            RETURNING {EVENT_COLUMNS};
        """
        with self._cursor(conn) as cur:
            cur.execute(sql, (status, event_id, organizer_id))
            row = cur.fetchone()
        return Event.from_row(row) if row else None

    def delete(self, event_id: int, organizer_id: int, conn=None) -> bool:
        with self._cursor(conn) as cur:
            cur.execute(
                "DELETE FROM events WHERE id = %s AND organizer_id = %s RETURNING id;",
                (event_id, organizer_id),
            )
            return cur.fetchone() is not None

    def list_open(self, conn=None) -> List[Event]:
        sql = f"""
            SELECT {EVENT_COLUMNS}
            FROM events
            WHERE status = %s
            ORDER BY start_time ASC;
        """
        return self._fetch_events(sql, (STATUS_OPEN,), conn)

    def list_by_organizer(self, organizer_id: int, conn=None) -> List[Event]:
        sql = f"""
            SELECT {EVENT_COLUMNS}
            FROM events
            WHERE organizer_id = %s
            ORDER BY start_time ASC;
        """
        return self._fetch_events(sql, (organizer_id,), conn)

    def list_by_participant(self, user_id: int, conn=None) -> List[Event]:
        sql = """
            SELECT e.id, e.name, e.description, e.location, e.start_time, e.end_time,
                   e.capacity, e.organizer_id, e.status, e.created_at, e.updated_at
            FROM events e
            JOIN participants p ON e.id = p.event_id
            WHERE p.user_id = %s
            ORDER BY e.start_time ASC;
        """
        return self._fetch_events(sql, (user_id,), conn)

    def list_participants(self, event_id: int, conn=None) -> List[User]:
        sql = """
            SELECT u.id, u.username, u.email, u.created_at
            FROM users u
            JOIN participants p ON u.id = p.user_id
            WHERE p.event_id = %s
            ORDER BY p.joined_at ASC;
        """
        with self._cursor(conn) as cur:
            cur.execute(sql, (event_id,))
            return [User.from_row(row) for row in cur.fetchall()]

    def _fetch_events(self, sql: str, params, conn=None) -> List[Event]:
        with self._cursor(conn) as cur:
            cur.execute(sql, params)
            return [Event.from_row(row) for row in cur.fetchall()]
