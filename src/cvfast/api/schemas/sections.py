"""Pydantic schemas for curriculum section endpoints.

Update schemas make every field optional; only provided fields are updated.
"""

from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cvfast.data.models import AddressType, ContactType, LanguageProficiency, SkillProficiency


class _DateRangeMixin(BaseModel):
    """Rejects an end date earlier than the start date when both are given."""

    @model_validator(mode="after")
    def check_date_range(self):
        start_date = getattr(self, "start_date", None)
        end_date = getattr(self, "end_date", None)
        if start_date and end_date and end_date < start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


# --- Experiences ---


class ExperienceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    curriculum_id: uuid.UUID
    company_name: str
    role: str
    description: str | None = None
    start_date: date
    end_date: date | None = None
    location: str | None = None


class ExperienceCreateRequest(_DateRangeMixin):
    company_name: str = Field(..., min_length=2, max_length=255, description="Company name")
    role: str = Field(..., min_length=2, max_length=255, description="Job title")
    description: str | None = Field(None, max_length=2000)
    start_date: date = Field(..., description="Start date (ISO format)")
    end_date: date | None = Field(None, description="End date, None if current")
    location: str | None = Field(None, max_length=255)


class ExperienceUpdateRequest(_DateRangeMixin):
    company_name: str | None = Field(None, min_length=2, max_length=255)
    role: str | None = Field(None, min_length=2, max_length=255)
    description: str | None = Field(None, max_length=2000)
    start_date: date | None = None
    end_date: date | None = None
    location: str | None = Field(None, max_length=255)


# --- Educations ---


class EducationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    curriculum_id: uuid.UUID
    institution: str
    degree: str
    field_of_study: str
    start_date: date
    end_date: date | None = None
    description: str | None = None


class EducationCreateRequest(_DateRangeMixin):
    institution: str = Field(..., min_length=2, max_length=255, description="School name")
    degree: str = Field(..., min_length=2, max_length=255, description="Degree or course")
    field_of_study: str = Field(..., min_length=2, max_length=255)
    start_date: date = Field(..., description="Start date (ISO format)")
    end_date: date | None = Field(None, description="End date, None if ongoing")
    description: str | None = Field(None, max_length=2000)


class EducationUpdateRequest(_DateRangeMixin):
    institution: str | None = Field(None, min_length=2, max_length=255)
    degree: str | None = Field(None, min_length=2, max_length=255)
    field_of_study: str | None = Field(None, min_length=2, max_length=255)
    start_date: date | None = None
    end_date: date | None = None
    description: str | None = Field(None, max_length=2000)


# --- Skills ---


class SkillResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    curriculum_id: uuid.UUID
    tech_name: str
    proficiency: SkillProficiency


class SkillCreateRequest(BaseModel):
    tech_name: str = Field(..., min_length=2, max_length=100, description="Technology name")
    proficiency: SkillProficiency


class SkillUpdateRequest(BaseModel):
    tech_name: str | None = Field(None, min_length=2, max_length=100)
    proficiency: SkillProficiency | None = None


# --- Languages ---


class LanguageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    curriculum_id: uuid.UUID
    language_name: str
    proficiency: LanguageProficiency


class LanguageCreateRequest(BaseModel):
    language_name: str = Field(..., min_length=2, max_length=100, description="Language name")
    proficiency: LanguageProficiency


class LanguageUpdateRequest(BaseModel):
    language_name: str | None = Field(None, min_length=2, max_length=100)
    proficiency: LanguageProficiency | None = None


# --- Contacts ---


class ContactResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    curriculum_id: uuid.UUID
    type: ContactType
    value: str
    is_primary: bool = False


class ContactCreateRequest(BaseModel):
    type: ContactType
    value: str = Field(..., min_length=2, max_length=255, description="Address, number or URL")
    is_primary: bool = Field(False, description="Primary contact for its type")


class ContactUpdateRequest(BaseModel):
    type: ContactType | None = None
    value: str | None = Field(None, min_length=2, max_length=255)
    is_primary: bool | None = None


# --- Addresses ---


class AddressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    curriculum_id: uuid.UUID
    street: str
    number: str
    complement: str | None = None
    neighborhood: str
    city: str
    state: str
    country: str | None = None
    zip_code: str | None = None
    type: AddressType


class AddressCreateRequest(BaseModel):
    street: str = Field(..., min_length=2, max_length=255)
    number: str = Field(..., min_length=1, max_length=20)
    complement: str | None = Field(None, max_length=100)
    neighborhood: str = Field(..., min_length=2, max_length=100)
    city: str = Field(..., min_length=2, max_length=100)
    state: str = Field(..., min_length=2, max_length=50)
    country: str | None = Field(None, max_length=50)
    zip_code: str | None = Field(None, max_length=20)
    type: AddressType


class AddressUpdateRequest(BaseModel):
    street: str | None = Field(None, min_length=2, max_length=255)
    number: str | None = Field(None, min_length=1, max_length=20)
    complement: str | None = Field(None, max_length=100)
    neighborhood: str | None = Field(None, min_length=2, max_length=100)
    city: str | None = Field(None, min_length=2, max_length=100)
    state: str | None = Field(None, min_length=2, max_length=50)
    country: str | None = Field(None, max_length=50)
    zip_code: str | None = Field(None, max_length=20)
    type: AddressType | None = None


SECTION_SCHEMAS: dict[str, tuple[type[BaseModel], type[BaseModel], type[BaseModel]]] = {
    "experiences": (ExperienceResponse, ExperienceCreateRequest, ExperienceUpdateRequest),
    "educations": (EducationResponse, EducationCreateRequest, EducationUpdateRequest),
    "skills": (SkillResponse, SkillCreateRequest, SkillUpdateRequest),
    "languages": (LanguageResponse, LanguageCreateRequest, LanguageUpdateRequest),
    "contacts": (ContactResponse, ContactCreateRequest, ContactUpdateRequest),
    "addresses": (AddressResponse, AddressCreateRequest, AddressUpdateRequest),
}
