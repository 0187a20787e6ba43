import pytest
from argon2 import PasswordHasher
from datetime import timedelta

from event_system.config import Config
from event_system.gateway.server import create_app
from event_system.tests.fakes import InMemoryStore, build_fake_services
from event_system.timeutils import utcnow

TEST_SECRET = "test_secret"


@pytest.fixture(autouse=True)
def fast_hasher(mocker):
    # Minimum Argon2 cost keeps the suite fast; the hashing path is unchanged
    fast = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)
    mocker.patch("event_system.auth_service.service.ph", fast)
    return fast


@pytest.fixture
def config():
    return Config(jwt_secret=TEST_SECRET, token_expiration_minutes=60, cors_origins=("*",))


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def services(config, store):
    return build_fake_services(config, store)


@pytest.fixture
def app(config, services):
    app = create_app(config, services)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(client):
    """
    Register a user through the API and return (auth headers, user dict).
    """
    def _register(username, email=None, password="password123"):
        email = email or f"{username}@example.com"
        response = client.post("/api/auth/register", json={
            "username": username,
            "email": email,
            "password": password,
        })
        assert response.status_code == 201, response.get_json()
        data = response.get_json()
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]

    return _register


@pytest.fixture
def event_payload():
    def _payload(**overrides):
        start = utcnow() + timedelta(hours=1)
        payload = {
            "name": "Team Meetup",
            "description": "Monthly sync",
            "location": "Room 101",
            "start_time": start.isoformat(),
            "end_time": (start + timedelta(hours=1)).isoformat(),
            "capacity": 10,
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def create_event(client, event_payload):
    def _create(headers, **overrides):
        response = client.post("/api/events", json=event_payload(**overrides), headers=headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _create


@pytest.fixture
def mock_db(mocker):
    """
    Mocks the Database and its pooled connection and cursor.
    """
    mock_conn = mocker.MagicMock()
    mock_cursor = mocker.MagicMock()

    # Setup the context manager for connection
    mock_conn.__enter__.return_value = mock_conn
    mock_conn.__exit__.return_value = None

    # Setup the context manager for cursor
    mock_cursor.__enter__.return_value = mock_cursor
    mock_cursor.__exit__.return_value = None

    # Connect cursor to connection
    mock_conn.cursor.return_value = mock_cursor

    db = mocker.Mock()
    db.transaction.return_value = mock_conn

    return db, mock_conn, mock_cursor
