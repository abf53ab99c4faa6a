from __future__ import annotations

from typing import Callable, Dict, List
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from towgo.integrations.errors import OAuthError
from towgo.integrations.oauth import GitHubOAuthClient, GoogleOAuthClient
from towgo.server.core.config import OAuthProviderConfig

pytestmark = pytest.mark.asyncio

GOOGLE_ENDPOINTS = {
    "token_endpoint": "http://mock/google/token",
    "userinfo_endpoint": "http://mock/google/userinfo",
}
GITHUB_ENDPOINTS = {
    "token_endpoint": "http://mock/github/token",
    "user_endpoint": "http://mock/github/user",
    "emails_endpoint": "http://mock/github/emails",
}


def _config(name: str) -> OAuthProviderConfig:
    return OAuthProviderConfig(
        name=name,
        client_id="client-id",
        client_secret="client-secret",
        callback_url=f"http://localhost:5000/auth/{name}/callback",
    )


def _transport(routes: Dict[str, Callable[[httpx.Request], httpx.Response]], seen: List[httpx.Request]):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        route = routes.get(request.url.path)
        return route(request) if route else httpx.Response(404, json={"error": "not found"})

    return httpx.MockTransport(handler)


def _google(routes, seen) -> GoogleOAuthClient:
    return GoogleOAuthClient(
        _config("google"), client=httpx.AsyncClient(transport=_transport(routes, seen)), endpoints=GOOGLE_ENDPOINTS
    )


def _github(routes, seen) -> GitHubOAuthClient:
    return GitHubOAuthClient(
        _config("github"), client=httpx.AsyncClient(transport=_transport(routes, seen)), endpoints=GITHUB_ENDPOINTS
    )


def _token(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"access_token": "at-123", "token_type": "bearer"})


def test_authorization_url() -> None:
    client = GoogleOAuthClient(_config("google"))
    url = urlparse(client.authorization_url("state-abc"))
    query = parse_qs(url.query)

    assert f"{url.scheme}://{url.netloc}{url.path}" == "https://accounts.google.com/o/oauth2/v2/auth"
    assert query["client_id"] == ["client-id"]
    assert query["redirect_uri"] == ["http://localhost:5000/auth/google/callback"]
    assert query["response_type"] == ["code"]
    assert query["scope"] == ["openid email profile"]
    assert query["state"] == ["state-abc"]


def test_unconfigured_provider() -> None:
    config = OAuthProviderConfig(name="github", callback_url="http://localhost:5000/auth/github/callback")
    assert GitHubOAuthClient(config).is_configured is False


class TestGoogle:
    async def test_authenticate(self) -> None:
        seen: List[httpx.Request] = []
        client = _google(
            {
                "/google/token": _token,
                "/google/userinfo": lambda r: httpx.Response(
                    200,
                    json={
                        "sub": "1234",
                        "email": "driver@example.com",
                        "email_verified": True,
                        "name": "Dee River",
                        "picture": "https://img.example.org/d.png",
                    },
                ),
            },
            seen,
        )

        profile = await client.authenticate("auth-code")

        assert profile.provider == "google"
        assert profile.provider_user_id == "1234"
        assert profile.email == "driver@example.com"
        assert profile.display_name == "Dee River"
        assert profile.username_hint == "driver"

        token_form = parse_qs(seen[0].content.decode())
        assert token_form["code"] == ["auth-code"]
        assert token_form["grant_type"] == ["authorization_code"]
        assert token_form["client_secret"] == ["client-secret"]
        assert seen[1].headers["authorization"] == "Bearer at-123"
        await client.aclose()

    async def test_unverified_email_is_dropped(self) -> None:
        seen: List[httpx.Request] = []
        client = _google(
            {
                "/google/token": _token,
                "/google/userinfo": lambda r: httpx.Response(
                    200, json={"sub": "1", "email": "x@example.com", "email_verified": False, "name": "Xavier"}
                ),
            },
            seen,
        )
        profile = await client.authenticate("code")
        assert profile.email is None
        assert profile.username_hint == "Xavier"
        await client.aclose()

    async def test_rejected_code(self) -> None:
        seen: List[httpx.Request] = []
        client = _google({"/google/token": lambda r: httpx.Response(400, json={"error": "invalid_grant"})}, seen)
        with pytest.raises(OAuthError) as exc_info:
            await client.authenticate("bad-code")
        assert exc_info.value.status_code == 400
        assert len(seen) == 1
        await client.aclose()

    async def test_token_response_without_token(self) -> None:
        seen: List[httpx.Request] = []
        client = _google({"/google/token": lambda r: httpx.Response(200, json={"error": "bad_verification_code"})}, seen)
        with pytest.raises(OAuthError, match="did not return an access token"):
            await client.exchange_code("code")
        await client.aclose()


class TestGitHub:
    async def test_public_email(self) -> None:
        seen: List[httpx.Request] = []
        client = _github(
            {
                "/github/token": _token,
                "/github/user": lambda r: httpx.Response(
                    200, json={"id": 42, "login": "octo", "email": "octo@example.com", "avatar_url": "https://a/o.png"}
                ),
            },
            seen,
        )
        profile = await client.authenticate("code")
        assert profile.provider_user_id == "42"
        assert profile.email == "octo@example.com"
        assert profile.display_name == "octo"
        assert profile.username_hint == "octo"
        assert [r.url.path for r in seen] == ["/github/token", "/github/user"]
        await client.aclose()

    async def test_private_email_uses_primary_verified(self) -> None:
        seen: List[httpx.Request] = []
        client = _github(
            {
                "/github/token": _token,
                "/github/user": lambda r: httpx.Response(200, json={"id": 7, "login": "quiet", "name": "Quiet One"}),
                "/github/emails": lambda r: httpx.Response(
                    200,
                    json=[
                        {"email": "old@example.com", "primary": False, "verified": True},
                        {"email": "main@example.com", "primary": True, "verified": True},
                    ],
                ),
            },
            seen,
        )
        profile = await client.authenticate("code")
        assert profile.email == "main@example.com"
        assert profile.display_name == "Quiet One"
        assert seen[-1].headers["accept"] == "application/vnd.github+json"
        await client.aclose()

    async def test_profile_without_id(self) -> None:
        seen: List[httpx.Request] = []
        client = _github(
            {"/github/token": _token, "/github/user": lambda r: httpx.Response(200, json={"message": "Bad credentials"})},
            seen,
        )
        with pytest.raises(OAuthError, match="no id"):
            await client.authenticate("code")
        await client.aclose()
