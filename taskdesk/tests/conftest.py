"""Shared fixtures: in-memory database, test client, and bearer tokens."""

import time

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from taskdesk import settings
from taskdesk.database import get_session
from taskdesk.main import app


@pytest.fixture(name="engine")
def engine_fixture():
    """Create a fresh in-memory database for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Create a test client with overridden database session."""
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="make_token")
def make_token_fixture():
    """Mint a token the way the identity provider would."""
    def make_token(user_id: str, role: str = "user", expires_in: int = 3600, **claims) -> str:
        payload = {
            "sub": user_id,
            "role": role,
            "username": user_id,
            "email": f"{user_id}@example.com",
            "exp": int(time.time()) + expires_in,
        }
        payload.update(claims)
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    return make_token


@pytest.fixture(name="login")
def login_fixture(client: TestClient, make_token):
    """Return auth headers for a principal, after it has been seen by the API once."""
    def login(user_id: str, role: str = "user") -> dict:
        headers = {"Authorization": f"Bearer {make_token(user_id, role)}"}
        response = client.get("/api/users/me", headers=headers)
        assert response.status_code == 200
        return headers

    return login


@pytest.fixture
def alice(login) -> dict:
    return login("alice")


@pytest.fixture
def bob(login) -> dict:
    return login("bob")


@pytest.fixture
def carol(login) -> dict:
    return login("carol")


@pytest.fixture
def admin(login) -> dict:
    return login("root", role="admin")
