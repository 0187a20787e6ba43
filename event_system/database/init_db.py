"""
Database bootstrap.

Creates the users, events and participants tables (idempotent) and checks
that they exist afterwards. Run directly with:

    python -m event_system.database.init_db
"""

import logging
import sys
from typing import List

from event_system.config import Config
from event_system.database.db_connection import Database

TABLES = ["users", "events", "participants"]

SCHEMA: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        username VARCHAR(50) UNIQUE NOT NULL,
        email VARCHAR(100) UNIQUE NOT NULL,
        password VARCHAR(255) NOT NULL,
        created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS events (
        id SERIAL PRIMARY KEY,
        name VARCHAR(100) NOT NULL,
        description TEXT,
        location VARCHAR(255),
        start_time TIMESTAMPTZ NOT NULL,
        end_time TIMESTAMPTZ NOT NULL,
        capacity INTEGER NOT NULL,
        organizer_id INTEGER NOT NULL REFERENCES users(id),
        status VARCHAR(20) NOT NULL DEFAULT 'open',
        created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        CONSTRAINT check_capacity CHECK (capacity > 0),
        CONSTRAINT check_time CHECK (end_time > start_time),
        CONSTRAINT check_status CHECK (status IN ('open', 'closed'))
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS participants (
        id SERIAL PRIMARY KEY,
        user_id INTEGER NOT NULL REFERENCES users(id),
        event_id INTEGER NOT NULL REFERENCES events(id),
        joined_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
        CONSTRAINT unique_participant UNIQUE (user_id, event_id)
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_events_organizer ON events (organizer_id);",
    "CREATE INDEX IF NOT EXISTS idx_events_status_start ON events (status, start_time);",
    "CREATE INDEX IF NOT EXISTS idx_participants_event ON participants (event_id);",
]


def create_tables(db: Database) -> None:
    """
    Execute the bootstrap DDL in a single transaction.

    Args:
        db (Database): Target database.

    Raises:
        psycopg2.Error: If any statement fails; nothing is committed then.
    """
    with db.transaction() as conn:
        with conn.cursor() as cur:
            for statement in SCHEMA:
                cur.execute(statement)
    logging.info("Database tables created successfully")


def missing_tables(db: Database) -> List[str]:
    """Return the names of required tables that do not exist."""
    missing = []
    with db.transaction() as conn:
        with conn.cursor() as cur:
            for table in TABLES:
                cur.execute("SELECT to_regclass(%s);", (table,))
                if cur.fetchone()[0] is None:
                    missing.append(table)
    return missing


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")
    config = Config.from_env()
    db = Database(config)

    try:
        create_tables(db)
        missing = missing_tables(db)
    except Exception as e:
        logging.error(f"Database bootstrap FAILED: {e}")
        return 1
    finally:
        db.close()

    if missing:
        logging.error(f"Tables still missing after bootstrap: {', '.join(missing)}")
        return 1

    for table in TABLES:
        logging.info(f" - {table}: Found")
    return 0


if __name__ == "__main__":
    sys.exit(main())
