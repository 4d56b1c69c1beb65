"""
Pytest fixtures for FFI calculator tests.

Uses an in-memory SQLite DB for speed and isolation.
StaticPool keeps a single connection so the :memory: database (and tables) persist.
Outbound calls to the membership site go through httpx.MockTransport.
"""

import os
import tempfile

# Keep the app's startup hook (log file, create_all) out of the project tree
_TMP = tempfile.mkdtemp(prefix="ffi-tests-")
os.environ.setdefault("FFI_LOG_DIR", os.path.join(_TMP, "logs"))
os.environ.setdefault("FFI_DB_PATH", os.path.join(_TMP, "ffi.db"))

import base64  # noqa: E402
import json  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from ffi_backend.auth import reset_rate_limits  # noqa: E402
from ffi_backend.database import Base, get_db  # noqa: E402
from ffi_backend.main import app  # noqa: E402
from ffi_backend.services.membership_service import get_http_client  # noqa: E402
from ffi_backend.services.rcm_service import RCMSessionStore, get_session_store  # noqa: E402

TEST_DB = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh in-memory DB and tables per test."""
    test_engine = create_engine(
        TEST_DB,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # single connection so :memory: DB and tables persist
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db_session(db_engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def session_store():
    return RCMSessionStore()


@pytest.fixture
def upstream():
    """
    Fake membership site. Tests set ``upstream.handler`` to a function
    taking an httpx.Request and returning an httpx.Response.
    """

    class Upstream:
        def __init__(self):
            self.handler = None
            self.requests: list[httpx.Request] = []

        def __call__(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if self.handler is None:
                return httpx.Response(503, json={"message": "no handler"})
            return self.handler(request)

    return Upstream()


@pytest.fixture
def client(db_engine, session_store, upstream):
    """FastAPI TestClient with test DB, a fresh RCM session store and a mocked membership site."""
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    async def override_http_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as c:
            yield c

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_http_client] = override_http_client
    reset_rate_limits()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_token():
    """Build an unsigned JWT-shaped token carrying a payload."""

    def part(obj: dict) -> str:
        return base64.urlsafe_b64encode(json.dumps(obj).encode()).decode().rstrip("=")

    def build(payload: dict) -> str:
        return f"{part({'alg': 'HS256', 'typ': 'JWT'})}.{part(payload)}.signature"

    return build
