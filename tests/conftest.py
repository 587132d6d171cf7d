"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest
from flask import Flask
from flask.testing import FlaskClient
from flask_jwt_extended import create_access_token

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from dashboard.api import ApiClient  # noqa: E402
from dashboard.local_store import MemoryStore  # noqa: E402
from dashboard.notifications import Notifier  # noqa: E402
from dashboard.query_cache import QueryCache  # noqa: E402
from dashboard.session import Session  # noqa: E402
from models import db  # noqa: E402
from models.user import User  # noqa: E402

DEFAULT_PASSWORD = "Password123"


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = "test-secret-key-that-is-long-enough-for-hs256"
    JWT_SECRET_KEY = SECRET_KEY
    RATE_LIMIT = "1000 per minute"
    INVITATION_ONLY_MODE = False
    FRONTEND_URL = "https://app.example"


@pytest.fixture()
def app(tmp_path) -> Flask:
    """Create a Flask application instance for tests."""

    upload_dir = tmp_path / "uploads"

    class TestConfig(_BaseTestConfig):
        UPLOAD_DIR = str(upload_dir)

    application = create_app(TestConfig)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def make_user(app: Flask) -> Callable[..., int]:
    """Persist a user and return its id."""

    def _make(
        email: str,
        role: str = "client",
        password: str = DEFAULT_PASSWORD,
        **fields,
    ) -> int:
        with app.app_context():
            fields.setdefault("first_name", email.split("@")[0].title())
            fields.setdefault("last_name", "Tester")
            user = User(email=email, role=role, **fields)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make


@pytest.fixture()
def auth_headers(app: Flask) -> Callable[[int], dict[str, str]]:
    def _headers(user_id: int) -> dict[str, str]:
        with app.app_context():
            token = create_access_token(identity=str(user_id))
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture()
def cache() -> QueryCache:
    return QueryCache()


@pytest.fixture()
def live_api(app: Flask, store: MemoryStore) -> ApiClient:
    """Dashboard API client wired straight into the Flask app."""

    api = ApiClient(
        "http://testserver", store, transport=httpx.WSGITransport(app=app)
    )
    yield api
    api.close()


@pytest.fixture()
def live_session(live_api: ApiClient, cache: QueryCache, store: MemoryStore) -> Session:
    return Session(live_api, cache, store)


class RecordingTransport(httpx.MockTransport):
    """Mock transport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def count(self, method: str, path: str) -> int:
        return sum(
            1 for r in self.requests if r.method == method and r.url.path == path
        )


@pytest.fixture()
def mock_api(store: MemoryStore):
    """Build an ``ApiClient`` over a handler; returns ``(api, transport)``."""

    clients = []

    def _build(handler: Callable[[httpx.Request], httpx.Response]):
        transport = RecordingTransport(handler)
        api = ApiClient("http://api.test", store, transport=transport)
        clients.append(api)
        return api, transport

    yield _build
    for api in clients:
        api.close()
