"""
Data access for the `participants` table.
"""

from datetime import datetime

from event_system.database.repository import BaseRepository, row_count
from event_system.participants_service.models import Participant


class ParticipantRepository(BaseRepository):

    def create(self, user_id: int, event_id: int, joined_at: datetime, conn=None) -> Participant:
        """
        Insert a join record.

        Raises:
            psycopg2.errors.UniqueViolation: The pair already exists.
        """
        sql = """
            INSERT INTO participants (user_id, event_id, joined_at)
            VALUES (%s, %s, %s)
            RETURNING id, user_id, event_id, joined_at;
        """
        with self._cursor(conn) as cur:
            cur.execute(sql, (user_id, event_id, joined_at))
            return Participant.from_row(cur.fetchone())

    def delete(self, user_id: int, event_id: int, conn=None) -> bool:
        with self._cursor(conn) as cur:
            cur.execute(
                "DELETE FROM participants WHERE user_id = %s AND event_id = %s RETURNING id;",
                (user_id, event_id),
            )
            return cur.fetchone() is not None

    def exists(self, user_id: int, event_id: int, conn=None) -> bool:
        with self._cursor(conn) as cur:
            cur.execute(
                "SELECT id FROM participants WHERE user_id = %s AND event_id = %s;",
                (user_id, event_id),
            )
            return cur.fetchone() is not None

    def count_for_event(self, event_id: int, conn=None) -> int:
        with self._cursor(conn) as cur:
            cur.execute(
                "SELECT COUNT(*) AS count FROM participants WHERE event_id = %s;",
                (event_id,),
            )
            return row_count(cur.fetchone())

    def count_active_for_user(self, user_id: int, now: datetime, conn=None) -> int:
        """Number of the user's memberships in events that have not ended yet."""
        sql = """
            SELECT COUNT(*) AS count
            FROM participants p
            JOIN events e ON p.event_id = e.id
            WHERE p.user_id = %s AND e.end_time > %s;
        """
        with self._cursor(conn) as cur:
            cur.execute(sql, (user_id, now))
            return row_count(cur.fetchone())
