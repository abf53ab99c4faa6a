"""
Authentication I/O models for the email/password and token endpoints.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserPublic(BaseModel):
    """User fields that are safe to return to any authenticated client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    email_verified: bool = False
    avatar: Optional[str] = None
    subscription_tier: str = "free"


class SignupRequest(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=6, max_length=128)
    email: Optional[EmailStr] = None
    display_name: Optional[str] = Field(default=None, max_length=128)
    referral_code: Optional[str] = Field(default=None, max_length=16)


class LoginRequest(BaseModel):
    username: str
    password: str


class EmailRequest(BaseModel):
    email: Optional[EmailStr] = None


class ResetPasswordRequest(BaseModel):
    password: Optional[str] = Field(default=None, max_length=128)


class AuthResponse(BaseModel):
    """Result of a successful signup or login."""

    success: bool = True
    message: str
    token: str
    token_type: str = "bearer"
    user: UserPublic


class CurrentUserResponse(BaseModel):
    success: bool = True
    user: UserPublic
