import os

# Keep the real database and broker out of the tests
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STORAGE_BACKEND", "sql")
os.environ.setdefault("JWT_SECRET", "test-secret")

import fakeredis  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import Engine, StaticPool, create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.orm.session import Session  # noqa: E402

import petu.models  # noqa: E402,F401
from petu.database.db import Base, get_db  # noqa: E402
from petu.main import app  # noqa: E402

# Use an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
engine: Engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Set up and tear down the database for the test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())


# Override the database dependency
def override_get_db():
    db: Session = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def redis_client(monkeypatch: pytest.MonkeyPatch):
    """Point the join lock at a fake Redis server shared by all threads."""
    server = fakeredis.FakeServer()

    def make_client():
        return fakeredis.FakeRedis(server=server, decode_responses=True)

    monkeypatch.setattr("petu.services.joins.get_redis_client", make_client)
    return make_client()


@pytest.fixture(autouse=True)
def host_notifications(monkeypatch: pytest.MonkeyPatch) -> list:
    """Record host notifications instead of sending them to a broker."""
    sent = []
    monkeypatch.setattr("petu.services.joins.enqueue_host_notification", sent.append)
    return sent


@pytest.fixture
def event_payload() -> dict:
    return {
        "title": "5-a-side",
        "description": "Friendly match",
        "category": "sports",
        "date": "2025-01-01T20:00",
        "location": "Field A",
        "maxPlayers": 10,
        "minQuorum": 4,
    }
