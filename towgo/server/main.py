"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers the exception handlers and includes all API
routers.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from towgo.core.database import init_db
from towgo.core.logging_config import get_logger, setup_logging
from towgo.core.monitoring import initialize_logfire

from .api.v1 import (
    achievements,
    auth,
    favorites,
    health,
    location_share,
    oauth,
    payments,
    referrals,
    search,
    services,
    subscription,
    users,
    webhooks,
    websearch,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware
from .services.location_sharing import location_share_store

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Startup prepares the database; shutdown drops the in-memory location
    shares and cancels their expiry timers.
    """
    # Startup
    try:
        logger.info("Starting up TowGo API server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down TowGo API server...")
    location_share_store.clear()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    TowGo API

    Backend of the TowGo app: tow truck search with AI query enhancement and web search,
    time-limited location sharing, user profiles and favorites, referrals and achievements,
    and Stripe payments and premium subscriptions.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(RequestLoggingMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)

app.include_router(health.router, tags=["health"])
app.include_router(oauth.router, tags=["oauth"])
app.include_router(webhooks.router, tags=["webhooks"])
app.include_router(auth.router, prefix=f"{constant.API_V1_STR}/auth", tags=["auth"])
app.include_router(users.router, prefix=f"{constant.API_V1_STR}/users", tags=["users"])
app.include_router(favorites.router, prefix=f"{constant.API_V1_STR}/favorites", tags=["favorites"])
app.include_router(search.router, prefix=constant.API_V1_STR, tags=["search"])
app.include_router(websearch.router, prefix=constant.API_V1_STR, tags=["search"])
app.include_router(location_share.router, prefix=constant.API_V1_STR, tags=["location-sharing"])
app.include_router(services.router, prefix=f"{constant.API_V1_STR}/services", tags=["services"])
app.include_router(payments.router, prefix=constant.API_V1_STR, tags=["payments"])
app.include_router(subscription.router, prefix=f"{constant.API_V1_STR}/subscription", tags=["subscription"])
app.include_router(referrals.router, prefix=f"{constant.API_V1_STR}/referrals", tags=["referrals"])
app.include_router(achievements.router, prefix=f"{constant.API_V1_STR}/achievements", tags=["achievements"])
