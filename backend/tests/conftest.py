"""
Pytest fixtures for test database, client, and seeded events.

Each test gets its own SQLite database file. The app's get_db dependency is
overridden so every request opens its own session on that database, the
same way it would against the real pool, so concurrent requests really do
race each other.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./drip_ticketing_dev.db")

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ticketing.db.base import Base
from ticketing.db.session import build_engine, get_db
from ticketing.main import app
from ticketing.models import Event, Ticket

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    url = TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'ticketing_test.db'}"
    test_engine = build_engine(url, echo=False)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get a fresh session on the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    # Unhandled errors come back as 500 responses instead of being re-raised
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_event(session_factory):
    """Insert an event directly into the store and return it (detached)."""

    async def _make_event(**overrides) -> Event:
        values = {
            "title": "Midnight Set",
            "description": "Live from the warehouse",
            "date": "2026-11-20",
            "time": "23:00",
            "price": 25.0,
            "total_tickets": 100,
            "sold_tickets": 0,
            "status": "upcoming",
            "creator_id": "creator-1",
            "stream_url": "https://stream.example.com/midnight-set",
        }
        values.update(overrides)
        async with session_factory() as session:
            event = Event(**values)
            session.add(event)
            await session.commit()
        return event

    return _make_event


@pytest.fixture
def store(session_factory):
    """Direct read access to the stores, bypassing the API."""

    class Store:
        async def event(self, event_id: str) -> Event:
            async with session_factory() as session:
                return await session.get(Event, event_id)

        async def tickets(self, event_id: str, status: str = None) -> list[Ticket]:
            query = select(Ticket).where(Ticket.event_id == event_id)
            if status:
                query = query.where(Ticket.status == status)
            async with session_factory() as session:
                return list((await session.execute(query)).scalars().all())

        async def ticket_count(self) -> int:
            async with session_factory() as session:
                return (await session.execute(select(func.count()).select_from(Ticket))).scalar()

    return Store()


@pytest_asyncio.fixture
async def test_event(make_event) -> Event:
    """An event with 100 tickets, none sold."""
    return await make_event()


@pytest_asyncio.fixture
async def sold_out_event(make_event) -> Event:
    """totalTickets=10, soldTickets=10."""
    return await make_event(title="Sold Out Show", total_tickets=10, sold_tickets=10)


@pytest_asyncio.fixture
async def last_ticket_event(make_event) -> Event:
    """totalTickets=1, soldTickets=0."""
    return await make_event(title="Intimate Session", total_tickets=1, price=40.0)
