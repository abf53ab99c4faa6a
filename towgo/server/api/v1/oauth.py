"""
Social Sign-In Endpoints.

Authorization-code flow for Google and GitHub. The callback signs the user in
and hands the access token to the web app through a redirect.
"""

from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import RedirectResponse

from towgo.core.logging_config import get_logger
from towgo.integrations.errors import OAuthError
from towgo.server.core.config import settings
from towgo.server.services.deps import OAUTH_PROVIDERS, AuthServiceDep, OAuthProviderDep
from towgo.server.services.security import create_oauth_state, verify_oauth_state

logger = get_logger(__name__)

router = APIRouter()


def _login_redirect(**params: str) -> RedirectResponse:
    return RedirectResponse(url=f"{settings.app_url.rstrip('/')}/login?{urlencode(params)}")


@router.get(
    "/auth/{provider}",
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    summary="Start Social Sign-In",
    description="Redirect to the provider's consent screen.",
    responses={404: {"description": "Unknown provider"}, 503: {"description": "Provider not configured"}},
)
async def oauth_start(provider: str, client: OAuthProviderDep) -> RedirectResponse:
    if not client.is_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=f"{provider} sign-in is not configured"
        )
    return RedirectResponse(url=client.authorization_url(create_oauth_state(provider)))


@router.get(
    "/auth/{provider}/callback",
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    summary="Social Sign-In Callback",
    description="Complete the provider sign-in and redirect to the app with a token or an error.",
    responses={404: {"description": "Unknown provider"}},
)
async def oauth_callback(
    provider: str,
    client: OAuthProviderDep,
    auth: AuthServiceDep,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
) -> RedirectResponse:
    """
    Provider callback.

    - success: redirect to ``/login?token=<access token>``
    - failure: redirect to ``/login?error=<reason>``
    """
    if error:
        logger.warning(f"{provider} sign-in returned error: {error}")
        return _login_redirect(error=error)
    if not code:
        return _login_redirect(error="no_auth_code")
    if not state or not verify_oauth_state(state, provider):
        logger.warning(f"{provider} sign-in callback with invalid state")
        return _login_redirect(error="invalid_state")

    try:
        profile = await client.authenticate(code)
    except OAuthError as e:
        logger.error(f"{provider} sign-in failed: {e}")
        return _login_redirect(error="auth_failed")

    user, token = await auth.login_with_oauth(profile)
    logger.info(f"User {user.id} signed in with {provider}")
    return _login_redirect(token=token)


@router.get(
    "/debug/oauth",
    summary="OAuth Configuration Status",
    description="Report which providers are configured and their callback URLs. Secrets are never returned.",
)
async def oauth_debug():
    providers = {}
    for name, (_, config_factory) in OAUTH_PROVIDERS.items():
        config = config_factory()
        providers[name] = {
            "clientIdConfigured": bool(config.client_id),
            "clientSecretConfigured": bool(config.client_secret),
            "configurationComplete": config.is_configured,
            "callbackUrl": config.callback_url,
        }
    return {"appUrl": settings.app_url, "providers": providers}
