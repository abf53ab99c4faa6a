"""Test configuration for database unit tests.

This module provides common fixtures for testing the database layer with
in-memory SQLite.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from towgo.core.database.entities import Service, User
from towgo.core.database.utils import create_all, create_sessionmaker


@pytest_asyncio.fixture
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine with every table."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def in_memory_session(in_memory_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with create_sessionmaker(in_memory_engine)() as session:
        yield session


@pytest.fixture
def sample_user_data() -> dict:
    return {
        "username": "driver",
        "email": "Driver@Example.com",
        "password_hash": "$2b$04$placeholder",
        "display_name": "Driver",
    }


@pytest.fixture
def sample_service_data() -> dict:
    return {"name": "Towing", "description": "Local tow up to 10 miles", "price": 89.99}


@pytest_asyncio.fixture
async def stored_user(in_memory_session, sample_user_data) -> User:
    user = User(**sample_user_data)
    in_memory_session.add(user)
    await in_memory_session.commit()
    await in_memory_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def stored_service(in_memory_session, sample_service_data) -> Service:
    service = Service(**sample_service_data)
    in_memory_session.add(service)
    await in_memory_session.commit()
    await in_memory_session.refresh(service)
    return service
