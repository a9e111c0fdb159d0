"""Pydantic schemas for curriculum API endpoints."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cvfast.api.schemas.sections import (
    AddressResponse,
    ContactResponse,
    EducationResponse,
    ExperienceResponse,
    LanguageResponse,
    SkillResponse,
)
from cvfast.api.schemas.short_links import ShortLinkResponse
from cvfast.data.models import CurriculumStatus


class CurriculumResponse(BaseModel):
    """Response schema for a curriculum's own fields."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    summary: str | None = None
    status: CurriculumStatus
    created_at: datetime
    updated_at: datetime


class CurriculumDetailResponse(CurriculumResponse):
    """Full curriculum projection with every section and its short links."""

    experiences: list[ExperienceResponse] = []
    educations: list[EducationResponse] = []
    skills: list[SkillResponse] = []
    languages: list[LanguageResponse] = []
    contacts: list[ContactResponse] = []
    addresses: list[AddressResponse] = []
    short_links: list[ShortLinkResponse] = []

    @classmethod
    def from_detail(cls, detail: dict, base_url: str) -> CurriculumDetailResponse:
        """Build a response from a service detail dict, adding share URLs."""
        links = [ShortLinkResponse.from_link(link, base_url) for link in detail["short_links"]]
        return cls(**{**detail, "short_links": links})


class CurriculumCreateRequest(BaseModel):
    """Request schema for creating a curriculum."""

    title: str = Field(..., min_length=2, max_length=255, description="Curriculum title")
    summary: str | None = Field(None, max_length=2000, description="Professional summary")
    status: CurriculumStatus = Field(CurriculumStatus.DRAFT, description="Publication status")


class CurriculumUpdateRequest(BaseModel):
    """Request schema for updating a curriculum.

    All fields are optional; only provided fields are updated.
    """

    title: str | None = Field(None, min_length=2, max_length=255)
    summary: str | None = Field(None, max_length=2000)
    status: CurriculumStatus | None = None
