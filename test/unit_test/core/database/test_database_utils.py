"""Unit tests for the engine and session helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine

from towgo.core.database.base import as_utc, utc_now
from towgo.core.database.utils import create_all, create_engine, create_sessionmaker


@pytest.mark.parametrize(
    "url",
    [
        "postgres://towgo:pw@db.example.org:5432/towgo",
        "postgresql://towgo:pw@db.example.org:5432/towgo",
        "postgresql+psycopg2://towgo:pw@db.example.org:5432/towgo",
        "postgresql+asyncpg://towgo:pw@db.example.org:5432/towgo",
    ],
)
def test_postgres_urls_use_asyncpg(url):
    engine = create_engine(url)
    assert isinstance(engine, AsyncEngine)
    assert engine.url.drivername == "postgresql+asyncpg"
    assert engine.url.host == "db.example.org"


def test_sqlite_url_passes_through():
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    assert engine.url.drivername == "sqlite+aiosqlite"


def test_sessionmaker_keeps_objects_loaded_after_commit():
    maker = create_sessionmaker(create_engine("sqlite+aiosqlite:///:memory:"))
    assert maker.kw["expire_on_commit"] is False


@pytest.mark.asyncio
async def test_create_all_registers_every_table(in_memory_engine):
    await create_all(in_memory_engine)

    async with in_memory_engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    assert set(tables) >= {"users", "favorites", "services", "payments", "referrals", "user_achievements"}


def test_utc_now_is_timezone_aware():
    assert utc_now().tzinfo is timezone.utc


@pytest.mark.parametrize(
    "value, expected",
    [
        (datetime(2025, 1, 1, 12, 0), datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)),
        (datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc), datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)),
        (None, None),
    ],
)
def test_as_utc(value, expected):
    assert as_utc(value) == expected


def test_as_utc_keeps_other_offsets():
    value = datetime(2025, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert as_utc(value) is value
