"""
Centralized database layer for TowGo.

Structure:
- entities/: SQLModel tables (users, favorites, services, payments, referrals, achievements)
- repositories/: Data access layer, one repository per table
- session.py: Global engine and session factory management
- utils.py: Engine/session helpers and table creation for tests and development
"""

from .base import Base, as_utc, utc_now
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
)

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "init_db",
    "as_utc",
    "utc_now",
]
