import pytest
from psycopg2.pool import PoolError

from event_system.config import Config
from event_system.database.db_connection import Database
from event_system.database.init_db import SCHEMA, create_tables, missing_tables
from event_system.errors import ServiceUnavailableError


@pytest.fixture
def pool(mocker):
    pool_cls = mocker.patch("event_system.database.db_connection.ThreadedConnectionPool")
    pool = pool_cls.return_value
    conn = mocker.MagicMock()
    pool.getconn.return_value = conn
    return pool_cls, pool, conn


def test_pool_is_created_lazily(pool):
    pool_cls, _, _ = pool
    db = Database(Config(db_pool_min=2, db_pool_max=4))

    pool_cls.assert_not_called()
    with db.transaction():
        pass

    pool_cls.assert_called_once()
    args, kwargs = pool_cls.call_args
    assert args == (2, 4)
    assert kwargs["dsn"] == db.config.dsn


def test_transaction_returns_connection(pool):
    _, pool_obj, conn = pool
    db = Database(Config())

    with db.transaction() as got:
        assert got is conn

    conn.__enter__.assert_called_once()
    conn.__exit__.assert_called_once()
    pool_obj.putconn.assert_called_once_with(conn)


def test_transaction_returns_connection_on_error(pool):
    _, pool_obj, conn = pool
    db = Database(Config())

    with pytest.raises(ValueError):
        with db.transaction():
            raise ValueError("boom")

    # psycopg2's connection context manager rolls back on error
    exc_type = conn.__exit__.call_args[0][0]
    assert exc_type is ValueError
    pool_obj.putconn.assert_called_once_with(conn)


def test_close(pool):
    _, pool_obj, _ = pool
    db = Database(Config())
    with db.transaction():
        pass

    db.close()
    pool_obj.closeall.assert_called_once()


def test_create_tables_runs_every_statement(mock_db):
    db, _, mock_cursor = mock_db

    create_tables(db)

    executed = [c.args[0] for c in mock_cursor.execute.call_args_list]
    assert executed == SCHEMA
    assert any("CONSTRAINT unique_participant UNIQUE (user_id, event_id)" in s for s in executed)


def test_missing_tables(mock_db):
    db, _, mock_cursor = mock_db
    mock_cursor.fetchone.side_effect = [("users",), (None,), ("participants",)]

    assert missing_tables(db) == ["events"]


def test_exhausted_pool_is_service_unavailable(pool):
    _, pool_obj, _ = pool
    pool_obj.getconn.side_effect = PoolError("connection pool exhausted")
    db = Database(Config(db_pool_max=2))

    with pytest.raises(ServiceUnavailableError) as exc:
        with db.transaction():
            pass

    assert exc.value.status_code == 503
    assert exc.value.to_dict()["code"] == "service_unavailable"
    pool_obj.putconn.assert_not_called()


def test_exhausted_pool_answers_503(client, services, mocker):
    mocker.patch.object(
        services.events, "list_public_events",
        side_effect=ServiceUnavailableError("database is busy, try again later"),
    )

    response = client.get("/api/events/public")

    assert response.status_code == 503
    assert response.get_json() == {
        "error": True,
        "message": "database is busy, try again later",
        "code": "service_unavailable",
    }
