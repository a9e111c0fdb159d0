"""Pydantic schemas for authentication and user endpoints."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    """Response schema for basic user information."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    name: str
    created_at: datetime


class RegisterRequest(BaseModel):
    """Request schema for registering a new account."""

    email: str = Field(
        ...,
        max_length=255,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        description="Login e-mail address",
    )
    name: str = Field(..., min_length=2, max_length=255, description="Display name")
    password: str = Field(..., min_length=6, max_length=128, description="Account password")


class LoginRequest(BaseModel):
    """Request schema for logging in."""

    email: str = Field(..., description="Login e-mail address")
    password: str = Field(..., description="Account password")


class UserUpdateRequest(BaseModel):
    """Request schema for updating the authenticated user.

    All fields are optional; ``new_password`` requires ``current_password``.
    """

    name: str | None = Field(None, min_length=2, max_length=255, description="Display name")
    current_password: str | None = Field(None, min_length=6, max_length=128)
    new_password: str | None = Field(None, min_length=6, max_length=128)


class AuthResponse(BaseModel):
    """Bearer token issued on register/login."""

    token: str
    token_type: str = "bearer"
    expiration: datetime
    user: UserResponse
