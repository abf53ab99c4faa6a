"""
Monitoring and Tracing Configuration Module.

Integrates Logfire for request tracing and metrics of the TowGo API:
- FastAPI endpoint tracing
- HTTPX calls to Perplexity, Stripe and the OAuth providers
- SQLAlchemy query monitoring
- Structured events for searches and payments

Everything here is opt-in through ``LOGFIRE_ENABLED``; when disabled the helpers
only write to the standard logger.
"""

import logging
import os
from typing import Any, Optional

import logfire
from fastapi import FastAPI

logger = logging.getLogger(__name__)

# Logfire configuration from environment
LOGFIRE_ENABLED = os.getenv("LOGFIRE_ENABLED", "false").lower() in ("true", "1", "yes")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "towgo-api")
LOGFIRE_SERVICE_VERSION = os.getenv("LOGFIRE_SERVICE_VERSION", "1.0.0")

# Feature flags
LOGFIRE_TRACE_SQLALCHEMY = os.getenv("LOGFIRE_TRACE_SQLALCHEMY", "true").lower() in ("true", "1", "yes")
LOGFIRE_TRACE_HTTPX = os.getenv("LOGFIRE_TRACE_HTTPX", "true").lower() in ("true", "1", "yes")
LOGFIRE_TRACE_FASTAPI = os.getenv("LOGFIRE_TRACE_FASTAPI", "true").lower() in ("true", "1", "yes")

_initialized = False


def is_enabled() -> bool:
    return _initialized


def initialize_logfire(app: FastAPI | None = None) -> bool:
    """
    Initialize Logfire for monitoring and tracing.

    Args:
        app: FastAPI application instance for endpoint instrumentation (optional).

    Returns:
        True when Logfire was configured, False when monitoring stays disabled.
    """
    global _initialized

    if not LOGFIRE_ENABLED:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not LOGFIRE_TOKEN:
        logger.warning(
            "Logfire is enabled but LOGFIRE_TOKEN is not set. "
            "Monitoring will not work. Set LOGFIRE_TOKEN to enable Logfire."
        )
        return False

    logfire.configure(
        token=LOGFIRE_TOKEN,
        service_name=LOGFIRE_SERVICE_NAME,
        service_version=LOGFIRE_SERVICE_VERSION,
        environment=LOGFIRE_ENVIRONMENT,
    )

    if LOGFIRE_TRACE_SQLALCHEMY:
        logfire.instrument_sqlalchemy()
        logger.info("Logfire: SQLAlchemy instrumentation enabled")

    if LOGFIRE_TRACE_HTTPX:
        logfire.instrument_httpx()
        logger.info("Logfire: HTTPX instrumentation enabled")

    if LOGFIRE_TRACE_FASTAPI and app is not None:
        logfire.instrument_fastapi(app=app)
        logger.info("Logfire: FastAPI instrumentation enabled")

    _initialized = True
    logger.info(f"Logfire monitoring initialized: environment={LOGFIRE_ENVIRONMENT}, service={LOGFIRE_SERVICE_NAME}")
    return True


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Log an API request with performance metrics.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
    """
    if not _initialized:
        logger.debug(f"{method} {path} -> {status_code} ({duration_ms:.2f}ms)")
        return
    logfire.info(
        "API request completed",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=duration_ms,
    )


def log_search(tier: str, query: str, result_count: int, duration_ms: Optional[float] = None) -> None:
    """
    Record which web-search tier answered a query.

    Args:
        tier: ``perplexity``, ``scrape`` or ``simulated``
        query: The full query sent to the tier
        result_count: Number of businesses returned
        duration_ms: Time spent in the tier
    """
    logger.info(f"Web search answered by {tier}: {result_count} results for '{query}'")
    if _initialized:
        logfire.info(
            "Web search completed",
            tier=tier,
            query=query,
            result_count=result_count,
            duration_ms=duration_ms,
        )


def log_payment_event(event_type: str, status: str, context: Optional[dict[str, Any]] = None) -> None:
    """
    Record the outcome of a Stripe webhook event.

    Args:
        event_type: Stripe event type (e.g. ``checkout.session.completed``)
        status: Result status produced by the handler
        context: Additional attributes to attach
    """
    logger.info(f"Stripe event {event_type} handled with status={status}")
    if _initialized:
        logfire.info("Stripe event handled", event_type=event_type, status=status, **(context or {}))
