"""
Data access for the `users` table.
"""

from typing import Optional

from event_system.auth_service.models import User
from event_system.database.repository import BaseRepository

USER_COLUMNS = "id, username, email, password, created_at, updated_at"


class UserRepository(BaseRepository):

    def create(self, username: str, email: str, password_hash: str, conn=None) -> User:
        sql = f"""
            INSERT INTO users (username, email, password)
            VALUES (%s, %s, %s)
            RETURNING {USER_COLUMNS};
        """
        with self._cursor(conn) as cur:
            cur.execute(sql, (username, email, password_hash))
            return User.from_row(cur.fetchone())

    def get_by_id(self, user_id: int, conn=None) -> Optional[User]:
        return self._get_one("id", user_id, conn)

    def get_by_email(self, email: str, conn=None) -> Optional[User]:
        return self._get_one("email", email, conn)

    def get_by_username(self, username: str, conn=None) -> Optional[User]:
        return self._get_one("username", username, conn)

    def lock(self, user_id: int, conn) -> bool:
        """
        Take a row lock on the user for the rest of `conn`'s transaction.

        Returns:
            bool: False if the user does not exist.
        """
        with self._cursor(conn) as cur:
            cur.execute("SELECT id FROM users WHERE id = %s FOR UPDATE;", (user_id,))
            return cur.fetchone() is not None

    def _get_one(self, column: str, value, conn=None) -> Optional[User]:
        # `column` is always one of our own literals, never user input
        sql = f"SELECT {USER_COLUMNS} FROM users WHERE {column} = %s;"
        with self._cursor(conn) as cur:
            cur.execute(sql, (value,))
            row = cur.fetchone()
        return User.from_row(row) if row else None
