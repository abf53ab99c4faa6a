"""
Handlers for errors raised by the service layer and the vendor clients.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from towgo.core.errors import TowGoError
from towgo.core.logging_config import get_logger
from towgo.integrations.errors import IntegrationError

logger = get_logger(__name__)


async def towgo_error_handler(request: Request, exc: TowGoError) -> JSONResponse:
    """Render a domain error as ``{"detail": message}`` with its status code."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} in {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


async def integration_error_handler(request: Request, exc: IntegrationError) -> JSONResponse:
    """
    A vendor call failed while serving the request.

    Answered with 502; the vendor's own status code is logged, not returned.
    """
    logger.error(
        f"{type(exc).__name__} in {request.method} {request.url.path}: {exc}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "upstream_status": exc.status_code,
            "error_type": type(exc).__name__,
        },
    )
    return JSONResponse(status_code=502, content={"detail": str(exc), "error_type": type(exc).__name__})
