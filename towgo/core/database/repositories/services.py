"""
Service catalog repository.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.services import Service
from .base import AsyncSQLModelRepository


class ServiceRepository(AsyncSQLModelRepository[Service]):
    """Repository for catalog services. Generic CRUD covers every use."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Service)
