"""Shared fixtures and helpers for the sleep tracker test suite."""

import os

# Keep the application engine off PostgreSQL; every test gets its own database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import datetime, timedelta
from typing import Optional

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from sleep_tracker.database.base import Base
from sleep_tracker.database.connection import get_db
from sleep_tracker.main import create_app
from sleep_tracker.models import SleepRecord, User, UserFollowing
from sleep_tracker.services.cache_service import InMemoryCache


# ---------------------------------------------------------------------------
# Database / app fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'sleep_tracker.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def cache():
    return InMemoryCache()


@pytest_asyncio.fixture
async def client(session_factory, cache):
    app = create_app()
    app.state.cache = cache

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Data helpers
# ---------------------------------------------------------------------------


async def make_user(db: AsyncSession, name: str = "Alice") -> User:
    user = User(name=name)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def make_record(
    db: AsyncSession,
    user: User,
    go_to_bed_at: datetime,
    duration: Optional[timedelta] = None,
) -> SleepRecord:
    """Insert a sleep record directly; active when no duration is given."""
    record = SleepRecord(user_id=user.id, go_to_bed_at=go_to_bed_at, created_at=go_to_bed_at)
    if duration is not None:
        record.wake_up_at = go_to_bed_at + duration
        record.duration = int(duration.total_seconds())
    db.add(record)
    await db.commit()
    await db.refresh(record)
    return record


async def make_follow(db: AsyncSession, follower: User, followed: User) -> UserFollowing:
    edge = UserFollowing(follower_id=follower.id, followed_id=followed.id)
    db.add(edge)
    await db.commit()
    return edge


def iso(moment: datetime) -> str:
    """Naive UTC datetime as an ISO 8601 string with a Z suffix."""
    return moment.replace(microsecond=0).isoformat() + "Z"
