"""
Account service.

Covers the email/password lifecycle (signup, login, email verification,
password reset) and the account side of social sign-in: finding, linking or
creating the user that an ``OAuthProfile`` belongs to.
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Optional, Tuple

from towgo.core.database.base import as_utc, utc_now
from towgo.core.database.entities import Referral, User
from towgo.core.database.repositories import ReferralRepository, UserRepository
from towgo.core.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from towgo.core.logging_config import get_logger
from towgo.core.models.io.auth import SignupRequest
from towgo.integrations.oauth import OAuthProfile

from .email import EmailService
from .security import create_access_token, generate_token, hash_password, verify_password

logger = get_logger(__name__)

VERIFICATION_TOKEN_TTL = timedelta(hours=24)
RESET_TOKEN_TTL = timedelta(hours=1)
MIN_PASSWORD_LENGTH = 6


class AuthService:
    def __init__(self, users: UserRepository, referrals: ReferralRepository, email: EmailService) -> None:
        self.users = users
        self.referrals = referrals
        self.email = email

    # ----------------------
    # Email and password
    # ----------------------
    async def signup(self, data: SignupRequest) -> Tuple[User, str]:
        """
        Create a password account.

        Args:
            data: Validated signup payload

        Returns:
            The new user and an access token

        Raises:
            ConflictError: Username or email already in use
        """
        if await self.users.username_exists(data.username):
            raise ConflictError("Username already taken")
        if data.email and await self.users.get_by_email(data.email) is not None:
            raise ConflictError("Email already registered")

        user = User(
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password),
            display_name=data.display_name or data.username,
        )
        if data.email:
            user.verification_token = generate_token()
            user.verification_token_expires = utc_now() + VERIFICATION_TOKEN_TTL
        user = await self.users.create(user)
        logger.info(f"User {user.id} signed up as '{user.username}'")

        if data.referral_code:
            await self._apply_signup_referral(user, data.referral_code)
        if user.email and user.verification_token:
            await self.email.send_verification_email(user.email, user.username, user.verification_token)
        return user, create_access_token(user.id)

    async def _apply_signup_referral(self, user: User, code: str) -> None:
        referrer = await self.users.get_by_referral_code(code.strip())
        if referrer is None or referrer.id == user.id:
            logger.warning(f"Ignoring invalid referral code at signup for user {user.id}")
            return
        await self.referrals.create(Referral(referrer_id=referrer.id, referred_user_id=user.id))
        user.referred_by_id = referrer.id
        await self.users.update(user)

    async def login(self, username: str, password: str) -> Tuple[User, str]:
        """
        Check credentials and issue an access token.

        Raises:
            AuthenticationError: Unknown user, OAuth-only account or wrong password
        """
        user = await self.users.get_by_username(username)
        if user is None:
            raise AuthenticationError("Incorrect username")
        if not user.password_hash:
            raise AuthenticationError("Password not set for this account")
        if not verify_password(password, user.password_hash):
            raise AuthenticationError("Incorrect password")
        return user, create_access_token(user.id)

    async def verify_email(self, token: str) -> User:
        user = await self.users.get_by_verification_token(token)
        if user is None:
            raise ValidationError("Invalid verification token")
        if user.verification_token_expires and as_utc(user.verification_token_expires) < utc_now():
            raise ValidationError("Verification token has expired")
        user.email_verified = True
        user.verification_token = None
        user.verification_token_expires = None
        return await self.users.update(user)

    async def resend_verification(self, email: Optional[str]) -> bool:
        """
        Issue a fresh verification link.

        Returns:
            Whether the email was sent

        Raises:
            ValidationError: No email given or the address is already verified
            NotFoundError: No user with this email
        """
        if not email:
            raise ValidationError("Email is required")
        user = await self.users.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found")
        if user.email_verified:
            raise ValidationError("Email is already verified")
        user.verification_token = generate_token()
        user.verification_token_expires = utc_now() + VERIFICATION_TOKEN_TTL
        user = await self.users.update(user)
        return await self.email.send_verification_email(email, user.username, user.verification_token)

    async def forgot_password(self, email: Optional[str]) -> None:
        """Send a reset link when the address belongs to a user; silent otherwise."""
        if not email:
            raise ValidationError("Email is required")
        user = await self.users.get_by_email(email)
        if user is None:
            logger.info("Password reset requested for an unknown email")
            return
        user.reset_password_token = generate_token()
        user.reset_password_expires = utc_now() + RESET_TOKEN_TTL
        user = await self.users.update(user)
        await self.email.send_password_reset_email(email, user.username, user.reset_password_token)

    async def reset_password(self, token: str, password: Optional[str]) -> User:
        if not password:
            raise ValidationError("Password is required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        user = await self.users.get_by_reset_token(token)
        if user is None:
            raise ValidationError("Invalid or expired reset token")
        if user.reset_password_expires and as_utc(user.reset_password_expires) < utc_now():
            raise ValidationError("Invalid or expired reset token")
        user.password_hash = hash_password(password)
        user.reset_password_token = None
        user.reset_password_expires = None
        user = await self.users.update(user)
        logger.info(f"Password reset for user {user.id}")
        return user

    # ----------------------
    # Social sign-in
    # ----------------------
    async def login_with_oauth(self, profile: OAuthProfile) -> Tuple[User, str]:
        """
        Resolve the account for a provider identity.

        Looks the user up by provider id, then links an existing account with
        the same email, and otherwise creates a new account.
        """
        user = await self.users.get_by_provider(profile.provider, profile.provider_user_id)
        if user is None and profile.email:
            user = await self.users.get_by_email(profile.email)
            if user is not None:
                user.provider_id = profile.provider
                user.provider_user_id = profile.provider_user_id
                user.email_verified = True
                user.avatar = user.avatar or profile.avatar
                user = await self.users.update(user)
                logger.info(f"Linked {profile.provider} account to user {user.id}")
        if user is None:
            user = await self.users.create(
                User(
                    username=await self._unique_username(profile.username_hint),
                    email=profile.email,
                    display_name=profile.display_name,
                    avatar=profile.avatar,
                    email_verified=bool(profile.email),
                    provider_id=profile.provider,
                    provider_user_id=profile.provider_user_id,
                )
            )
            logger.info(f"Created user {user.id} from {profile.provider} sign-in")
        return user, create_access_token(user.id)

    async def _unique_username(self, hint: str) -> str:
        base = re.sub(r"[^a-zA-Z0-9_.-]", "", hint or "")[:48] or "user"
        candidate = base
        suffix = 1
        while await self.users.username_exists(candidate):
            suffix += 1
            candidate = f"{base}{suffix}"
        return candidate
