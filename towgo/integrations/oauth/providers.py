"""OAuth 2.0 authorization-code clients for Google and GitHub.

Each provider client builds the authorization redirect, exchanges the code
for an access token, and normalizes the provider's user profile into an
``OAuthProfile``. Account linking is done by the server, not here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from towgo.server.core.config import OAuthProviderConfig

from ..errors import IntegrationError, OAuthError


@dataclass(frozen=True)
class OAuthProfile:
    """Identity returned by a provider after a successful sign-in."""

    provider: str
    provider_user_id: str
    email: Optional[str]
    display_name: Optional[str]
    avatar: Optional[str]
    username_hint: str


class OAuthProviderClient:
    """Shared authorization-code flow; subclasses describe their endpoints and profile shape."""

    name: str = ""
    authorize_endpoint: str = ""
    token_endpoint: str = ""
    scope: str = ""

    def __init__(
        self,
        config: OAuthProviderConfig,
        *,
        client: Optional[httpx.AsyncClient] = None,
        endpoints: Optional[Dict[str, str]] = None,
        timeout: float = 10.0,
    ) -> None:
        """Create a provider client.

        Args:
            config: Client credentials and callback URL.
            client: Optional preconfigured ``httpx.AsyncClient``.
            endpoints: Optional overrides of the endpoint attributes (by attribute name).
            timeout: Default HTTP timeout for the internal client.
        """
        self.config = config
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._logger = logging.getLogger(__name__)
        for attribute, url in (endpoints or {}).items():
            setattr(self, attribute, url)

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    async def aclose(self) -> None:
        await self._client.aclose()

    def authorization_url(self, state: str) -> str:
        query = {
            "client_id": self.config.client_id,
            "redirect_uri": self.config.callback_url,
            "response_type": "code",
            "scope": self.scope,
            "state": state,
        }
        return f"{self.authorize_endpoint}?{urlencode(query)}"

    async def _send(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error = IntegrationError.from_status_error(self.name, e)
            raise OAuthError(str(error), status_code=error.status_code, details=error.details) from e
        except httpx.HTTPError as e:
            raise OAuthError(f"{self.name} request failed: {e}") from e
        return response.json()

    async def exchange_code(self, code: str) -> str:
        """Exchange an authorization code for an access token.

        Raises:
            OAuthError: When the provider rejects the code.
        """
        data = await self._send(
            "POST",
            self.token_endpoint,
            data={
                "client_id": self.config.client_id,
                "client_secret": self.config.client_secret,
                "code": code,
                "redirect_uri": self.config.callback_url,
                "grant_type": "authorization_code",
            },
            headers={"Accept": "application/json"},
        )
        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise OAuthError(f"{self.name} did not return an access token", details=data)
        return str(token)

    async def fetch_profile(self, access_token: str) -> OAuthProfile:
        raise NotImplementedError

    async def authenticate(self, code: str) -> OAuthProfile:
        """Run the code exchange and profile lookup."""
        access_token = await self.exchange_code(code)
        return await self.fetch_profile(access_token)


class GoogleOAuthClient(OAuthProviderClient):
    name = "google"
    authorize_endpoint = "https://accounts.google.com/o/oauth2/v2/auth"
    token_endpoint = "https://oauth2.googleapis.com/token"
    userinfo_endpoint = "https://openidconnect.googleapis.com/v1/userinfo"
    scope = "openid email profile"

    async def fetch_profile(self, access_token: str) -> OAuthProfile:
        data = await self._send("GET", self.userinfo_endpoint, headers={"Authorization": f"Bearer {access_token}"})
        if not data.get("sub"):
            raise OAuthError("Google profile has no subject", details=data)
        email = data.get("email") if data.get("email_verified", True) else None
        return OAuthProfile(
            provider=self.name,
            provider_user_id=str(data["sub"]),
            email=email,
            display_name=data.get("name"),
            avatar=data.get("picture"),
            username_hint=(email or data.get("name") or "google_user").split("@")[0],
        )


class GitHubOAuthClient(OAuthProviderClient):
    name = "github"
    authorize_endpoint = "https://github.com/login/oauth/authorize"
    token_endpoint = "https://github.com/login/oauth/access_token"
    user_endpoint = "https://api.github.com/user"
    emails_endpoint = "https://api.github.com/user/emails"
    scope = "read:user user:email"

    async def fetch_profile(self, access_token: str) -> OAuthProfile:
        headers = {"Authorization": f"Bearer {access_token}", "Accept": "application/vnd.github+json"}
        data = await self._send("GET", self.user_endpoint, headers=headers)
        if not data.get("id"):
            raise OAuthError("GitHub profile has no id", details=data)
        email = data.get("email")
        if not email:
            # Private emails are only listed by the emails endpoint
            emails = await self._send("GET", self.emails_endpoint, headers=headers)
            primary = next((e for e in emails if e.get("primary") and e.get("verified")), None)
            email = primary.get("email") if primary else None
        return OAuthProfile(
            provider=self.name,
            provider_user_id=str(data["id"]),
            email=email,
            display_name=data.get("name") or data.get("login"),
            avatar=data.get("avatar_url"),
            username_hint=data.get("login") or "github_user",
        )
