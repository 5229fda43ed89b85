import os
import random
import tempfile
from datetime import datetime, timedelta

# Settings are read at import time; point them at throwaway resources first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ["QR_ENABLED"] = "false"
os.environ["MEDIA_PATH"] = tempfile.mkdtemp(prefix="shortlinks-media-")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shortlinks.main import app
from shortlinks.api import dependencies
from shortlinks.db.Models.models import Base
from shortlinks.db.Connection import database
from shortlinks.services.metrics import ClickLedger
from shortlinks.services.shortener import URLService
from shortlinks.utils.encoding import CodeGenerator


# Create in-memory SQLite database for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FrozenClock:
    """Callable clock the tests move by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def db_session():
    """Creates a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    return FrozenClock(datetime(2024, 3, 1, 10, 0, 0))


@pytest.fixture
def session_factory(db_session):
    return TestingSessionLocal


@pytest.fixture
def ledger(session_factory):
    return ClickLedger(session_factory)


@pytest.fixture
def service(db_session, ledger, clock):
    return URLService(db_session, CodeGenerator(random.Random(1234)), ledger, clock=clock)


@pytest.fixture
def client(db_session, clock):
    """Creates a test client with overridden database and clock dependencies."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[database.get_db] = override_get_db
    app.dependency_overrides[database.get_session_factory] = lambda: TestingSessionLocal
    app.dependency_overrides[dependencies.get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_urls():
    """Provides sample URLs for testing."""
    return [
        "https://example.com/test1",
        "https://google.com/search?q=test",
        "https://github.com/user/repo",
    ]
