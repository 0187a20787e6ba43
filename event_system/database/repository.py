"""
Shared plumbing for the data-access classes.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from event_system.database.db_connection import Database


class BaseRepository:
    def __init__(self, db: Database) -> None:
        self.db = db

    @contextmanager
    def _cursor(self, conn=None) -> Iterator[Any]:
        """
        Yield a cursor.

        When `conn` is given the statement joins the caller's transaction,
        otherwise a short transaction of its own is opened and committed.
        """
        if conn is not None:
            with conn.cursor() as cur:
                yield cur
            return

        with self.db.transaction() as own_conn:
            with own_conn.cursor() as cur:
                yield cur


def row_count(row: Optional[dict], key: str = "count") -> int:
    if not row:
        return 0
    return int(row[key])
