"""
ComfortMap Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── sample_review_data: One submitted review, as the browser sends it
    ├── review_store: Session factory over a throwaway SQLite database
    ├── test_client: HTTPX AsyncClient wired to the app and review_store
    └── make_geocoder: Geocoder backed by an httpx MockTransport
"""

import os
import tempfile

# Override settings BEFORE any comfortmap import: the settings singleton and
# the module-level engine are built at import time
os.environ["DATABASE_URL"] = (
    "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(prefix="comfortmap_test_"), "test.db")
)
os.environ["DB_AUTO_CREATE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from comfortmap.database import Base, get_db_session  # noqa: E402
from comfortmap.models.review import Review  # noqa: E402,F401
from comfortmap.services.geocoding_service import Geocoder  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_list(mock_db_session):
            mock_db_session.execute.return_value.scalars.return_value.all.return_value = []
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_review_data():
    """The fields of one review, as ReviewBoard / the browser would POST them."""
    return {
        "text": (
            "My review of Luna's in Park Slope is Great noodles (Rating: 9/10) "
            "[Noise: loud] [Crowd: busy] [Lighting: soft] [Texture: crunchy] "
            "[Features: outdoor seating]"
        ),
        "restaurant": "Luna's",
        "location": "Park Slope",
        "scale": 9,
        "review": "Great noodles",
        "lat": 40.671,
        "lon": -73.9814,
    }


@pytest_asyncio.fixture
async def review_store(tmp_path):
    """
    Session factory over a fresh SQLite database with the reviews table.

    Why a private engine: each test gets its own event loop, and pooled
    aiosqlite connections must not outlive it.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'reviews.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(review_store):
    """
    HTTPX AsyncClient talking to the API (no static mount) over review_store.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/notes")
    """
    from comfortmap.main import create_app

    app = create_app(serve_static=False)

    async def override_session():
        async with review_store() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_geocoder():
    """
    Build a Geocoder whose HTTP calls are answered by `handler`.

    Usage:
        geocoder = make_geocoder(lambda request: httpx.Response(200, json=[]))
    """

    def factory(handler):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return Geocoder(url="https://geocoder.test/search", client=client)

    return factory
