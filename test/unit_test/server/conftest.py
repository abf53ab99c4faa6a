from typing import AsyncGenerator, Callable, Dict, List
from unittest.mock import patch

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.pool import StaticPool

from towgo.core.database.base import Base

# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "secret123"


class MockAPI:
    """MockTransport handler that records requests and answers with ``handler``."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(404, json={})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for each test."""
    import towgo.core.database.entities  # noqa: F401

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async_session_maker = sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session_maker() as session:  # type: ignore[attr-defined]
        yield session


@pytest.fixture
def perplexity_api() -> MockAPI:
    return MockAPI()


@pytest.fixture
def stripe_api() -> MockAPI:
    return MockAPI()


@pytest.fixture
def scrape_api() -> MockAPI:
    api = MockAPI()
    api.handler = lambda request: httpx.Response(200, text="<html><body></body></html>")
    return api


@pytest_asyncio.fixture
async def perplexity_client(perplexity_api: MockAPI):
    """Unconfigured by default; set ``api_key`` to enable it."""
    from towgo.integrations.perplexity import PerplexityClient

    client = PerplexityClient(
        None,
        base_url="http://mock/perplexity",
        client=httpx.AsyncClient(transport=httpx.MockTransport(perplexity_api)),
    )
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def stripe_client(stripe_api: MockAPI):
    """Unconfigured by default; set ``secret_key`` to enable it."""
    from towgo.integrations.stripe import StripeClient

    client = StripeClient(
        None,
        api_base="http://mock/stripe/v1",
        client=httpx.AsyncClient(transport=httpx.MockTransport(stripe_api)),
    )
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def search_scraper(scrape_api: MockAPI):
    from towgo.integrations.websearch import SearchPageScraper

    scraper = SearchPageScraper(
        google_url="http://mock/google/search",
        bing_url="http://mock/bing/search",
        client=httpx.AsyncClient(transport=httpx.MockTransport(scrape_api)),
    )
    yield scraper
    await scraper.aclose()


@pytest_asyncio.fixture(name="client")
async def client_fixture(
    session: AsyncSession, perplexity_client, stripe_client, search_scraper
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from towgo.core.database import get_session
    from towgo.server.main import app
    from towgo.server.services.deps import get_perplexity_client, get_search_scraper, get_stripe_client
    from towgo.server.services.location_sharing import location_share_store

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    async def get_perplexity_override():
        yield perplexity_client

    async def get_stripe_override():
        yield stripe_client

    async def get_scraper_override():
        yield search_scraper

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_perplexity_client] = get_perplexity_override
    app.dependency_overrides[get_stripe_client] = get_stripe_override
    app.dependency_overrides[get_search_scraper] = get_scraper_override

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("towgo.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()
    location_share_store.clear()


@pytest_asyncio.fixture
async def user(session: AsyncSession):
    """A password account with a verified email."""
    from towgo.core.database.entities import User
    from towgo.core.database.repositories import UserRepository
    from towgo.server.services.security import hash_password

    return await UserRepository(session).create(
        User(
            username="driver",
            email="driver@example.com",
            email_verified=True,
            password_hash=hash_password(TEST_PASSWORD),
            display_name="Driver",
        )
    )


@pytest_asyncio.fixture
async def other_user(session: AsyncSession):
    from towgo.core.database.entities import User
    from towgo.core.database.repositories import UserRepository
    from towgo.server.services.security import hash_password

    return await UserRepository(session).create(
        User(username="helper", email="helper@example.com", password_hash=hash_password(TEST_PASSWORD))
    )


@pytest.fixture
def headers_for() -> Callable[..., Dict[str, str]]:
    """Build bearer auth headers for any user."""
    from towgo.server.services.security import create_access_token

    def _headers(account) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(account.id)}"}

    return _headers


@pytest.fixture
def auth_headers(user, headers_for) -> Dict[str, str]:
    return headers_for(user)
