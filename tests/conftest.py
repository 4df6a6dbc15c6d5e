"""
Pytest configuration and fixtures for testing.
"""
import os

# Must be set before the application settings are imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./devevent_app_test.db")
os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

import uuid
import pytest
import pytest_asyncio
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from devevent.main import app
from devevent.db.session import Base, get_session
from devevent.db.models import Event, Booking


# Test database URL - point at PostgreSQL with TEST_DATABASE_URL to run against the real driver
TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///./devevent_test.db"
)

# Create test engine
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    poolclass=NullPool,  # Disable connection pooling for tests
    echo=False,
)

# Create test session factory
TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def today_utc():
    return datetime.now(timezone.utc).date()


def _event_payload(**overrides) -> dict:
    """A complete, valid event payload in wire (camelCase) form."""
    payload = {
        "title": "React Summit",
        "description": "A conference about React and the web platform",
        "overview": "Two days of talks and workshops",
        "image": "https://images.example.com/events/react-summit.png",
        "venue": "Beurs van Berlage",
        "location": "Amsterdam, Netherlands",
        "date": "2030-06-14",
        "time": "9:30 AM",
        "mode": "offline",
        "audience": "Frontend developers",
        "organizer": "GitNation",
        "agenda": ["Registration", "Keynote", "Workshops"],
        "tags": ["react", "javascript", "frontend"],
    }
    payload.update(overrides)
    return payload


def _make_event(**overrides) -> Event:
    """An already-normalized Event row."""
    fields = {
        "slug": "react-summit",
        "title": "React Summit",
        "description": "A conference about React and the web platform",
        "overview": "Two days of talks and workshops",
        "image": "https://images.example.com/events/react-summit.png",
        "venue": "Beurs van Berlage",
        "location": "Amsterdam, Netherlands",
        "date": "2030-06-14",
        "time": "09:30",
        "mode": "offline",
        "audience": "Frontend developers",
        "organizer": "GitNation",
        "agenda": ["Registration", "Keynote"],
        "tags": ["react", "javascript"],
        "created_at": BASE_TIME,
        "updated_at": BASE_TIME,
    }
    fields.update(overrides)
    return Event(**fields)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database session for each test.
    Tables are dropped and recreated around every test for isolation.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing API endpoints.
    Overrides the database session dependency.
    """
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession) -> Event:
    """Create a single upcoming event."""
    event = _make_event()
    db_session.add(event)
    await db_session.commit()
    return event


@pytest_asyncio.fixture
async def test_events(db_session: AsyncSession) -> list:
    """
    Create a small catalogue of events.

    Three upcoming, one past; two share a date so the created-at tie-break is visible.
    """
    today = today_utc()
    future = (today + timedelta(days=30)).isoformat()
    later = (today + timedelta(days=60)).isoformat()
    past = (today - timedelta(days=30)).isoformat()
    events = [
        _make_event(
            slug="react-online-meetup",
            title="React Online Meetup",
            description="Hooks in depth",
            organizer="React Berlin",
            location="Online",
            venue="Zoom",
            mode="online",
            date=future,
            tags=["react", "javascript"],
            created_at=BASE_TIME,
        ),
        _make_event(
            slug="python-day",
            title="Python Day",
            description="Talks about typing and packaging",
            organizer="PyLadies",
            location="Berlin, Germany",
            mode="offline",
            date=future,
            tags=["python", "backend"],
            created_at=BASE_TIME + timedelta(hours=1),
        ),
        _make_event(
            slug="cloud-native-summit",
            title="Cloud Native Summit",
            description="Kubernetes, operators and React dashboards",
            organizer="CNCF",
            location="berlin, germany",
            mode="hybrid",
            date=later,
            tags=["cloud", "DevOps"],
            created_at=BASE_TIME + timedelta(hours=2),
        ),
        _make_event(
            slug="legacy-java-night",
            title="Legacy Java Night",
            description="Stories from the monolith",
            organizer="JUG",
            location="London, UK",
            mode="offline",
            date=past,
            tags=["java", "backend"],
            created_at=BASE_TIME + timedelta(hours=3),
        ),
    ]
    db_session.add_all(events)
    await db_session.commit()
    return events


@pytest_asyncio.fixture
async def test_booking(db_session: AsyncSession, test_event: Event) -> Booking:
    """Create a booking for test_event."""
    booking = Booking(event_id=test_event.id, email="attendee@example.com", created_at=BASE_TIME, updated_at=BASE_TIME)
    db_session.add(booking)
    await db_session.commit()
    return booking


@pytest.fixture
def fake_upload(monkeypatch):
    """Replace the S3 upload with an in-memory recorder."""
    uploads = []

    def upload(file_data: bytes, object_name: str, content_type: str = "image/jpeg") -> str:
        uploads.append({"data": file_data, "object_name": object_name, "content_type": content_type})
        return f"https://cdn.example.com/{object_name}"

    from devevent.core import storage
    monkeypatch.setattr(storage, "upload_image", upload)
    return uploads


@pytest.fixture
def unknown_event_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def event_payload():
    """Factory for valid event payloads; keyword overrides replace fields."""
    return _event_payload


@pytest.fixture
def event_factory():
    """Factory for normalized Event rows (not yet added to a session)."""
    return _make_event
