import pytest
from fastapi.testclient import TestClient

from technotes_backend.src.api.config import AppConfig
from technotes_backend.src.api.main import create_app
from technotes_backend.src.api.notes import NoteLedger
from technotes_backend.src.api.users import UserDirectory

from fakes import FakeHasher, FakeNoteRepository, FakeUserRepository


@pytest.fixture
def app_config():
    """Application config backed by a private in-memory SQLite database."""
    return AppConfig(database_url="sqlite://", allowed_origins=["http://localhost:3000"], bcrypt_rounds=4)


@pytest.fixture
def app(app_config):
    return create_app(app_config)


@pytest.fixture
def client(app):
    """Fixture for FastAPI TestClient; entering it creates the tables."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(app, client):
    """SQLAlchemy session on the same database the client writes to."""
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_store():
    return FakeUserRepository()


@pytest.fixture
def note_store():
    return FakeNoteRepository()


@pytest.fixture
def hasher():
    return FakeHasher()


@pytest.fixture
def directory(user_store, note_store, hasher):
    return UserDirectory(user_store, note_store, hasher)


@pytest.fixture
def ledger(note_store, user_store):
    return NoteLedger(note_store, user_store)


@pytest.fixture
def user_data():
    """Returns default user data for creation."""
    return {"username": "Alice", "password": "pw1"}


@pytest.fixture
def second_user_data():
    """Returns a second user's data."""
    return {"username": "bob", "password": "pw2", "roles": ["Manager"]}


def user_id_by_name(client, username):
    """Helper that lists users and returns the id of username."""
    users = client.get("/users").json()
    return next(user["id"] for user in users if user["username"] == username)


@pytest.fixture
def alice_id(client, user_data):
    r = client.post("/users", json=user_data)
    assert r.status_code == 201
    return user_id_by_name(client, user_data["username"])


@pytest.fixture
def bob_id(client, second_user_data):
    r = client.post("/users", json=second_user_data)
    assert r.status_code == 201
    return user_id_by_name(client, second_user_data["username"])
