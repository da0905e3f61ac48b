"""Pytest fixtures: one fresh app per test on in-memory SQLite, with a fake push sender."""
import os

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

# Must be set before app modules are imported (process settings also drive the rate limits)
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RATE_LIMIT_LOGIN_PER_MINUTE", "1000")
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "1000")

from app.core.config import Settings
from app.core.database import build_engine, init_db
from app.core.rate_limit import limiter
from app.main import create_app
from app.services.push import DeliveryError

SECRET_KEY = "test-secret-key"
SUPERADMIN_USERNAME = "superadmin"
SUPERADMIN_PASSWORD = "superadmin123"


class FakePushSender:
    """Records every send; endpoints listed in status_by_endpoint fail with that HTTP status."""

    def __init__(self):
        self.status_by_endpoint: dict[str, int | None] = {}
        self.errors_by_endpoint: dict[str, Exception] = {}
        self.calls: list[tuple[str, str]] = []

    async def send(self, subscription_info: dict, payload: str) -> None:
        endpoint = subscription_info["endpoint"]
        self.calls.append((endpoint, payload))
        if endpoint in self.errors_by_endpoint:
            raise self.errors_by_endpoint[endpoint]
        if endpoint in self.status_by_endpoint:
            raise DeliveryError(self.status_by_endpoint[endpoint], "fake push service")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite:///:memory:",
        secret_key=SECRET_KEY,
        superadmin_username=SUPERADMIN_USERNAME,
        superadmin_password=SUPERADMIN_PASSWORD,
        vapid_public_key="test-public-key",
    )


@pytest.fixture
def push_sender() -> FakePushSender:
    return FakePushSender()


@pytest.fixture
def app(settings, push_sender):
    application = create_app(settings)
    application.state.push_sender = push_sender
    return application


@pytest.fixture
def client(app):
    """TestClient; the lifespan creates tables and seeds the superadmin."""
    limiter.reset()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def engine():
    """Bare database for service-level tests."""
    eng = build_engine("sqlite:///:memory:")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


def login(client: TestClient, username: str, password: str) -> dict:
    r = client.post("/api/login", json={"username": username, "password": password})
    assert r.status_code == 200, f"Login failed: {r.status_code} {r.text}"
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture
def superadmin_headers(client) -> dict:
    return login(client, SUPERADMIN_USERNAME, SUPERADMIN_PASSWORD)


@pytest.fixture
def make_admin(client, superadmin_headers):
    """Creates an admin through the API and returns (id, auth headers)."""

    def _make(username: str = "alice", password: str = "alice123", permissions: dict | None = None):
        body = {"username": username, "password": password}
        if permissions is not None:
            body["permissions"] = permissions
        r = client.post("/api/admin/create", json=body, headers=superadmin_headers)
        assert r.status_code == 201, r.text
        return r.json()["id"], login(client, username, password)

    return _make


@pytest.fixture
def login_as(client):
    def _login(username: str, password: str) -> dict:
        return login(client, username, password)

    return _login
