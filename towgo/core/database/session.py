"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from __future__ import annotations

import os
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from towgo.core.logging_config import get_logger
from towgo.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

logger = get_logger(__name__)

# Create global engine and session factory
engine = create_engine(settings.database_url)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLAlchemy session.
    """
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """
    Initialize the database.

    In production the schema is owned by Alembic (``alembic upgrade head``).
    For local development set ``TOWGO_AUTO_CREATE_TABLES=true`` to create
    missing tables from the ORM metadata at startup.
    """
    if os.getenv("TOWGO_AUTO_CREATE_TABLES", "false").lower() in ("true", "1", "yes"):
        await create_all(engine)
        logger.info("Database tables created from ORM metadata")
    else:
        logger.debug("Skipping table creation; schema is managed by Alembic migrations")
