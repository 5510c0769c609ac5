"""Shared fixtures: scripted randomness, a fixed clock and an in-memory registry."""

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from agrocarbon.core.database import create_tables, get_session
from main import app

FIXED_NOW = datetime(2025, 9, 2, 9, 40, tzinfo=timezone.utc)


class ScriptedRandom:
    """
    Random source with scripted draws.

    ``uniform`` returns, in order: seasonal noise, previous-NDVI ratio,
    area factor, cloud coverage. ``choice`` returns the item at
    ``source_index``.
    """

    def __init__(self, noise=0.0, previous_ratio=0.9, area_factor=1.0, cloud_coverage=5.0, source_index=0):
        self._draws = [noise, previous_ratio, area_factor, cloud_coverage]
        self._source_index = source_index

    def uniform(self, a, b):
        value = self._draws.pop(0)
        assert a <= value <= b, f"scripted draw {value} outside [{a}, {b}]"
        return value

    def choice(self, seq):
        return seq[self._source_index]


@pytest.fixture
def scripted():
    """Factory for ScriptedRandom instances."""
    return ScriptedRandom


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(db_engine):
    session_factory = async_sessionmaker(bind=db_engine, expire_on_commit=False, class_=AsyncSession)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_engine):
    session_factory = async_sessionmaker(bind=db_engine, expire_on_commit=False, class_=AsyncSession)

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()
