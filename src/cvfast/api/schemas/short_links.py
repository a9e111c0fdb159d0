"""Pydantic schemas for short link API endpoints."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

ACCESS_PATH = "/api/shortlinks/access"


def share_url(base_url: str, hash_value: str) -> str:
    """Public URL that resolves ``hash_value``."""
    return f"{base_url.rstrip('/')}{ACCESS_PATH}/{hash_value}"


class ShortLinkResponse(BaseModel):
    """Response schema for a short link."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    curriculum_id: uuid.UUID
    hash: str
    full_url: str
    is_revoked: bool
    created_at: datetime
    revoked_at: datetime | None = None

    @classmethod
    def from_link(cls, link: dict, base_url: str) -> ShortLinkResponse:
        """Build a response from a short link dict, adding its share URL."""
        return cls(**link, full_url=share_url(base_url, link["hash"]))


class ShortLinkCreateRequest(BaseModel):
    """Request schema for explicitly creating a short link."""

    curriculum_id: uuid.UUID = Field(..., description="Curriculum the link will resolve to")


class AccessLogResponse(BaseModel):
    """Response schema for one recorded access."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    short_link_id: uuid.UUID
    ip: str
    user_agent: str | None = None
    accessed_at: datetime
