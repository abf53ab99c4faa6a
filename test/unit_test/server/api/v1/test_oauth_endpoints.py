"""
Unit tests for the social sign-in endpoints.

Provider clients are replaced with configured clients whose token and profile
endpoints are served by an ``httpx.MockTransport``.
"""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from towgo.core.database.repositories import UserRepository
from towgo.server.services.security import create_oauth_state, decode_access_token

pytestmark = pytest.mark.asyncio

MOCK_ENDPOINTS = {
    "google": {
        "authorize_endpoint": "http://mock/google/authorize",
        "token_endpoint": "http://mock/google/token",
        "userinfo_endpoint": "http://mock/google/userinfo",
    },
    "github": {
        "authorize_endpoint": "http://mock/github/authorize",
        "token_endpoint": "http://mock/github/token",
        "user_endpoint": "http://mock/github/user",
        "emails_endpoint": "http://mock/github/emails",
    },
}


def provider_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path.endswith("/token"):
        if b"code=bad" in request.content:
            return httpx.Response(400, json={"error": "bad_verification_code"})
        return httpx.Response(200, json={"access_token": "provider-token"})
    if path == "/google/userinfo":
        return httpx.Response(
            200,
            json={
                "sub": "g-123",
                "email": "driver@example.com",
                "email_verified": True,
                "name": "Google Driver",
                "picture": "http://mock/avatar.png",
            },
        )
    if path == "/github/user":
        return httpx.Response(200, json={"id": 77, "login": "octo", "name": None, "email": None})
    if path == "/github/emails":
        return httpx.Response(200, json=[{"email": "octo@example.com", "primary": True, "verified": True}])
    return httpx.Response(404)


@pytest_asyncio.fixture
async def configured_providers(client: AsyncClient):
    """Serve both providers with credentials from the mock transport."""
    from fastapi import HTTPException

    from towgo.server.main import app
    from towgo.server.services.deps import OAUTH_PROVIDERS, get_oauth_provider

    async def get_oauth_provider_override(provider: str):
        entry = OAUTH_PROVIDERS.get(provider)
        if entry is None:
            raise HTTPException(status_code=404, detail=f"Unknown OAuth provider: {provider}")
        client_cls, config = entry
        provider_client = client_cls(
            config().model_copy(update={"client_id": "client-id", "client_secret": "client-secret"}),
            client=httpx.AsyncClient(transport=httpx.MockTransport(provider_handler)),
            endpoints=MOCK_ENDPOINTS[provider],
        )
        try:
            yield provider_client
        finally:
            await provider_client.aclose()

    app.dependency_overrides[get_oauth_provider] = get_oauth_provider_override
    yield
    app.dependency_overrides.pop(get_oauth_provider, None)


def login_params(response: httpx.Response) -> dict:
    location = urlparse(response.headers["location"])
    assert location.path == "/login"
    return {k: v[0] for k, v in parse_qs(location.query).items()}


class TestOAuthStart:
    async def test_unconfigured_provider_returns_503(self, client: AsyncClient):
        response = await client.get("/auth/google")
        assert response.status_code == 503

    async def test_unknown_provider_returns_404(self, client: AsyncClient):
        response = await client.get("/auth/myspace")
        assert response.status_code == 404

    async def test_redirects_to_consent_screen(self, client: AsyncClient, configured_providers):
        response = await client.get("/auth/github")
        assert response.status_code == 307
        location = urlparse(response.headers["location"])
        assert location.path == "/github/authorize"
        query = parse_qs(location.query)
        assert query["client_id"] == ["client-id"]
        assert query["redirect_uri"] == ["http://localhost:5000/auth/github/callback"]
        assert query["state"][0]


class TestOAuthCallback:
    async def test_provider_error_is_forwarded(self, client: AsyncClient, configured_providers):
        response = await client.get("/auth/google/callback", params={"error": "access_denied"})
        assert login_params(response) == {"error": "access_denied"}

    async def test_missing_code(self, client: AsyncClient, configured_providers):
        response = await client.get("/auth/google/callback")
        assert login_params(response) == {"error": "no_auth_code"}

    async def test_state_for_other_provider_is_rejected(self, client: AsyncClient, configured_providers):
        response = await client.get(
            "/auth/google/callback", params={"code": "good", "state": create_oauth_state("github")}
        )
        assert login_params(response) == {"error": "invalid_state"}

    async def test_rejected_code(self, client: AsyncClient, configured_providers):
        response = await client.get("/auth/google/callback", params={"code": "bad", "state": create_oauth_state("google")})
        assert login_params(response) == {"error": "auth_failed"}

    async def test_google_sign_in_links_existing_account(
        self, client: AsyncClient, session: AsyncSession, configured_providers, user
    ):
        response = await client.get(
            "/auth/google/callback", params={"code": "good", "state": create_oauth_state("google")}
        )
        params = login_params(response)
        assert decode_access_token(params["token"]) == user.id

        await session.refresh(user)
        assert user.provider_id == "google"
        assert user.provider_user_id == "g-123"
        assert user.avatar == "http://mock/avatar.png"

    async def test_github_sign_in_creates_account(self, client: AsyncClient, session: AsyncSession, configured_providers):
        response = await client.get(
            "/auth/github/callback", params={"code": "good", "state": create_oauth_state("github")}
        )
        user_id = decode_access_token(login_params(response)["token"])
        created = await UserRepository(session).get_by_id(user_id)
        assert created.username == "octo"
        assert created.email == "octo@example.com"
        assert created.email_verified is True
        assert created.password_hash is None


class TestOAuthDebug:
    async def test_debug_reports_configuration_without_secrets(self, client: AsyncClient):
        response = await client.get("/debug/oauth")
        assert response.status_code == 200
        data = response.json()
        assert data["appUrl"] == "http://localhost:5000"
        assert set(data["providers"]) == {"google", "github"}
        google = data["providers"]["google"]
        assert google == {
            "clientIdConfigured": False,
            "clientSecretConfigured": False,
            "configurationComplete": False,
            "callbackUrl": "http://localhost:5000/auth/google/callback",
        }
