"""
Authentication Endpoints.

Email/password accounts with bearer token authentication: signup, login,
current user, email verification and password reset.
"""

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import RedirectResponse

from towgo.core.models.io.auth import (
    AuthResponse,
    CurrentUserResponse,
    EmailRequest,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    UserPublic,
)
from towgo.core.models.io.common import MessageResponse
from towgo.server.core.config import settings
from towgo.server.services.deps import AuthServiceDep, CurrentUser

router = APIRouter()

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, a password reset link has been sent"


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign Up",
    description="Create an account with a username and password.",
    response_description="The new user and an access token.",
    responses={409: {"description": "Username or email already in use"}},
)
async def signup(data: SignupRequest, auth: AuthServiceDep) -> AuthResponse:
    """
    Create a new account.

    - **username**: 3 to 64 characters, unique
    - **password**: at least 6 characters
    - **email**: optional; a verification link is sent when given
    - **referral_code**: optional code of the user who invited you
    """
    user, token = await auth.signup(data)
    return AuthResponse(message="User created successfully", token=token, user=UserPublic.model_validate(user))


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log In",
    description="Exchange a username and password for an access token.",
    response_description="The user and an access token.",
    responses={401: {"description": "Incorrect credentials"}},
)
async def login(data: LoginRequest, auth: AuthServiceDep) -> AuthResponse:
    user, token = await auth.login(data.username, data.password)
    return AuthResponse(message="Login successful", token=token, user=UserPublic.model_validate(user))


@router.get(
    "/logout",
    response_model=MessageResponse,
    summary="Log Out",
    description="Tokens are stateless; the client discards its token.",
)
async def logout() -> MessageResponse:
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/current-user",
    response_model=CurrentUserResponse,
    summary="Get Current User",
    description="Return the user of the bearer token.",
    responses={401: {"description": "Not authenticated"}},
)
async def current_user(user: CurrentUser) -> CurrentUserResponse:
    return CurrentUserResponse(user=UserPublic.model_validate(user))


@router.get(
    "/verify-email/{token}",
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    summary="Verify Email",
    description="Confirm an email address from the link sent at signup, then redirect to the app.",
    responses={400: {"description": "Invalid or expired token"}},
)
async def verify_email(token: str, auth: AuthServiceDep) -> RedirectResponse:
    await auth.verify_email(token)
    return RedirectResponse(url=f"{settings.app_url.rstrip('/')}/email-verified")


@router.post(
    "/resend-verification",
    response_model=MessageResponse,
    summary="Resend Verification Email",
    description="Send a fresh verification link to an unverified address.",
    responses={
        400: {"description": "Email missing or already verified"},
        404: {"description": "User not found"},
        500: {"description": "Email could not be sent"},
    },
)
async def resend_verification(data: EmailRequest, auth: AuthServiceDep) -> MessageResponse:
    sent = await auth.resend_verification(data.email)
    if not sent:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to send verification email"
        )
    return MessageResponse(message="Verification email sent")


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Forgot Password",
    description="Email a password reset link. The response is the same whether or not the account exists.",
)
async def forgot_password(data: EmailRequest, auth: AuthServiceDep) -> MessageResponse:
    await auth.forgot_password(data.email)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post(
    "/reset-password/{token}",
    response_model=MessageResponse,
    summary="Reset Password",
    description="Set a new password using the token from the reset email.",
    responses={400: {"description": "Missing password, or invalid or expired token"}},
)
async def reset_password(token: str, data: ResetPasswordRequest, auth: AuthServiceDep) -> MessageResponse:
    await auth.reset_password(token, data.password)
    return MessageResponse(message="Password has been reset successfully")
