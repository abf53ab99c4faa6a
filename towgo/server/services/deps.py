"""
Request dependencies.

Provides the database-backed repositories, the vendor clients (closed after
each request), the service objects built from them, and the bearer token
authentication used by the routers. Each dependency has an ``Annotated``
alias so endpoints can declare e.g. ``user: CurrentUser``.
"""

from typing import Annotated, AsyncGenerator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from towgo.core.database import get_session
from towgo.core.database.entities import User
from towgo.core.database.repositories import (
    AchievementRepository,
    FavoriteRepository,
    PaymentRepository,
    ReferralRepository,
    ServiceRepository,
    UserRepository,
)
from towgo.integrations.oauth import GitHubOAuthClient, GoogleOAuthClient, OAuthProviderClient
from towgo.integrations.perplexity import PerplexityClient
from towgo.integrations.stripe import StripeClient
from towgo.integrations.websearch import SearchPageScraper
from towgo.server.core.config import settings

from .achievements import AchievementService
from .auth import AuthService
from .email import EmailService
from .location_sharing import LocationShareStore, location_share_store
from .payments import PaymentService
from .referrals import ReferralService
from .security import decode_access_token
from .subscription import SubscriptionService
from .websearch import WebSearchService

SessionDep = Annotated[AsyncSession, Depends(get_session)]


# ----------------------
# Repositories
# ----------------------
def get_user_repository(session: SessionDep) -> UserRepository:
    return UserRepository(session)


def get_favorite_repository(session: SessionDep) -> FavoriteRepository:
    return FavoriteRepository(session)


def get_service_repository(session: SessionDep) -> ServiceRepository:
    return ServiceRepository(session)


def get_payment_repository(session: SessionDep) -> PaymentRepository:
    return PaymentRepository(session)


def get_referral_repository(session: SessionDep) -> ReferralRepository:
    return ReferralRepository(session)


def get_achievement_repository(session: SessionDep) -> AchievementRepository:
    return AchievementRepository(session)


UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]
FavoriteRepositoryDep = Annotated[FavoriteRepository, Depends(get_favorite_repository)]
ServiceRepositoryDep = Annotated[ServiceRepository, Depends(get_service_repository)]
PaymentRepositoryDep = Annotated[PaymentRepository, Depends(get_payment_repository)]
ReferralRepositoryDep = Annotated[ReferralRepository, Depends(get_referral_repository)]
AchievementRepositoryDep = Annotated[AchievementRepository, Depends(get_achievement_repository)]


# ----------------------
# Vendor clients
# ----------------------
async def get_perplexity_client() -> AsyncGenerator[PerplexityClient, None]:
    config = settings.perplexity
    client = PerplexityClient(config.api_key, base_url=config.base_url, timeout=config.timeout)
    try:
        yield client
    finally:
        await client.aclose()


async def get_stripe_client() -> AsyncGenerator[StripeClient, None]:
    config = settings.stripe
    client = StripeClient(config.secret_key, api_base=config.api_base)
    try:
        yield client
    finally:
        await client.aclose()


async def get_search_scraper() -> AsyncGenerator[SearchPageScraper, None]:
    scraper = SearchPageScraper()
    try:
        yield scraper
    finally:
        await scraper.aclose()


OAUTH_PROVIDERS = {
    "google": (GoogleOAuthClient, lambda: settings.google),
    "github": (GitHubOAuthClient, lambda: settings.github),
}


async def get_oauth_provider(provider: str) -> AsyncGenerator[OAuthProviderClient, None]:
    """Client for the ``{provider}`` path parameter; 404 for unknown providers."""
    entry = OAUTH_PROVIDERS.get(provider)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown OAuth provider: {provider}")
    client_cls, config = entry
    client = client_cls(config())
    try:
        yield client
    finally:
        await client.aclose()


def get_location_share_store() -> LocationShareStore:
    return location_share_store


PerplexityDep = Annotated[PerplexityClient, Depends(get_perplexity_client)]
StripeDep = Annotated[StripeClient, Depends(get_stripe_client)]
OAuthProviderDep = Annotated[OAuthProviderClient, Depends(get_oauth_provider)]
LocationShareStoreDep = Annotated[LocationShareStore, Depends(get_location_share_store)]


# ----------------------
# Services
# ----------------------
def get_email_service() -> EmailService:
    return EmailService(settings.smtp, settings.app_url)


def get_auth_service(
    users: UserRepositoryDep,
    referrals: ReferralRepositoryDep,
    email: Annotated[EmailService, Depends(get_email_service)],
) -> AuthService:
    return AuthService(users, referrals, email)


def get_achievement_service(repository: AchievementRepositoryDep) -> AchievementService:
    return AchievementService(repository)


AchievementServiceDep = Annotated[AchievementService, Depends(get_achievement_service)]


def get_referral_service(
    users: UserRepositoryDep, referrals: ReferralRepositoryDep, achievements: AchievementServiceDep
) -> ReferralService:
    return ReferralService(users, referrals, achievements, settings.app_url)


def get_websearch_service(
    perplexity: PerplexityDep, scraper: Annotated[SearchPageScraper, Depends(get_search_scraper)]
) -> WebSearchService:
    return WebSearchService(perplexity, scraper)


def get_payment_service(
    stripe: StripeDep,
    users: UserRepositoryDep,
    services: ServiceRepositoryDep,
    payments: PaymentRepositoryDep,
) -> PaymentService:
    return PaymentService(stripe, users, services, payments)


def get_subscription_service(stripe: StripeDep, users: UserRepositoryDep) -> SubscriptionService:
    return SubscriptionService(stripe, users)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ReferralServiceDep = Annotated[ReferralService, Depends(get_referral_service)]
WebSearchServiceDep = Annotated[WebSearchService, Depends(get_websearch_service)]
PaymentServiceDep = Annotated[PaymentService, Depends(get_payment_service)]
SubscriptionServiceDep = Annotated[SubscriptionService, Depends(get_subscription_service)]


# ----------------------
# Authentication
# ----------------------
bearer_scheme = HTTPBearer(auto_error=False)


async def get_optional_user(
    users: UserRepositoryDep,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> Optional[User]:
    """The user of a valid bearer token, or None for anonymous requests."""
    if credentials is None:
        return None
    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        return None
    return await users.get_by_id(user_id)


async def get_current_user(user: Annotated[Optional[User], Depends(get_optional_user)]) -> User:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


OptionalUser = Annotated[Optional[User], Depends(get_optional_user)]
CurrentUser = Annotated[User, Depends(get_current_user)]
