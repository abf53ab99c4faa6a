"""
Health Check Endpoints.

Liveness (``/health``), readiness (``/health/ready``, which also checks the
database) and version information for load balancers and deployment checks.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from towgo.core.logging_config import get_logger
from towgo.server.core import constant
from towgo.server.services.deps import SessionDep

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Check that the API server process is up.",
    response_description="Status object.",
)
async def health_check():
    """
    Liveness probe. Does not touch the database.
    """
    return {"status": "ok"}


@router.get(
    "/health/ready",
    summary="Readiness Check",
    description="Check that the API server can reach its database.",
    responses={503: {"description": "Database unreachable"}},
)
async def readiness_check(session: SessionDep):
    """
    Readiness probe.

    - **status**: ``ok`` or ``unavailable``
    - **database**: ``ok`` or ``unavailable``
    """
    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "database": "unavailable"},
        )
    return {"status": "ok", "database": "ok"}


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    return {"version": constant.VERSION, "schema_version": constant.SCHEMA_VERSION}
