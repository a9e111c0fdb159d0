"""Shared dependencies for API routes."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cvfast.config import get_settings
from cvfast.services.access_log import UNKNOWN_IP
from cvfast.services.auth import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False, description="JWT issued by /api/auth/login")

BearerCredentials = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def get_current_user_id(credentials: BearerCredentials) -> uuid.UUID:
    """Get the authenticated user's ID from the bearer token.

    Args:
        credentials: Parsed ``Authorization: Bearer`` header, if any.

    Returns:
        uuid.UUID: Authenticated user ID.

    Raises:
        HTTPException: If the token is missing, invalid or expired (401).
    """
    user_id = decode_access_token(credentials.credentials) if credentials else None
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def get_optional_user_id(credentials: BearerCredentials) -> uuid.UUID | None:
    """Get the authenticated user's ID, or None for anonymous access.

    Unlike ``get_current_user_id`` this does **not** raise 401. An invalid
    token is treated the same as no token, so anonymous endpoints never
    reveal whether a token was accepted.
    """
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)


def get_share_base_url(request: Request) -> str:
    """Base URL used to build short link ``full_url`` values."""
    return get_settings().public_base_url or str(request.base_url).rstrip("/")


def get_client_ip(request: Request) -> str:
    """Remote address of the caller, or ``UNKNOWN_IP`` when unavailable."""
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_IP


CurrentUserId = Annotated[uuid.UUID, Depends(get_current_user_id)]
OptionalUserId = Annotated[uuid.UUID | None, Depends(get_optional_user_id)]
ShareBaseUrl = Annotated[str, Depends(get_share_base_url)]
ClientIp = Annotated[str, Depends(get_client_ip)]
