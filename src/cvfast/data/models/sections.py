"""Section entities that make up a curriculum.

Each section row belongs to exactly one curriculum and is removed with it.
"""

from __future__ import annotations

import uuid
from datetime import date
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, Enum, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cvfast.data.db import Base

if TYPE_CHECKING:
    from cvfast.data.models.curriculum import Curriculum


class SkillProficiency(StrEnum):
    BASIC = "Basic"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"


class LanguageProficiency(StrEnum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    FLUENT = "Fluent"
    NATIVE = "Native"


class ContactType(StrEnum):
    EMAIL = "Email"
    PHONE = "Phone"
    LINKEDIN = "LinkedIn"
    GITHUB = "GitHub"
    WEBSITE = "Website"
    OTHER = "Other"


class AddressType(StrEnum):
    RESIDENTIAL = "Residential"
    CURRENT = "Current"
    COMMERCIAL = "Commercial"
    OTHER = "Other"


def _enum_column(enum_cls: type[StrEnum], name: str) -> Enum:
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
    )


def _curriculum_fk() -> Mapped[uuid.UUID]:
    return mapped_column(
        Uuid, ForeignKey("curriculums.id", ondelete="CASCADE"), nullable=False, index=True
    )


class Experience(Base):
    """Professional experience entry."""

    __tablename__ = "experiences"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    curriculum_id: Mapped[uuid.UUID] = _curriculum_fk()
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)

    curriculum: Mapped[Curriculum] = relationship("Curriculum", back_populates="experiences")


class Education(Base):
    """Academic education entry."""

    __tablename__ = "educations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    curriculum_id: Mapped[uuid.UUID] = _curriculum_fk()
    institution: Mapped[str] = mapped_column(String(255), nullable=False)
    degree: Mapped[str] = mapped_column(String(255), nullable=False)
    field_of_study: Mapped[str] = mapped_column(String(255), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    curriculum: Mapped[Curriculum] = relationship("Curriculum", back_populates="educations")


class Skill(Base):
    """Technical skill with a proficiency level."""

    __tablename__ = "skills"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    curriculum_id: Mapped[uuid.UUID] = _curriculum_fk()
    tech_name: Mapped[str] = mapped_column(String(100), nullable=False)
    proficiency: Mapped[SkillProficiency] = mapped_column(
        _enum_column(SkillProficiency, "skill_proficiency"), nullable=False
    )

    curriculum: Mapped[Curriculum] = relationship("Curriculum", back_populates="skills")


class Language(Base):
    """Spoken language with a proficiency level."""

    __tablename__ = "languages"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    curriculum_id: Mapped[uuid.UUID] = _curriculum_fk()
    language_name: Mapped[str] = mapped_column(String(100), nullable=False)
    proficiency: Mapped[LanguageProficiency] = mapped_column(
        _enum_column(LanguageProficiency, "language_proficiency"), nullable=False
    )

    curriculum: Mapped[Curriculum] = relationship("Curriculum", back_populates="languages")


class Contact(Base):
    """Contact channel (e-mail, phone, profile URL...)."""

    __tablename__ = "contacts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    curriculum_id: Mapped[uuid.UUID] = _curriculum_fk()
    type: Mapped[ContactType] = mapped_column(
        _enum_column(ContactType, "contact_type"), nullable=False
    )
    value: Mapped[str] = mapped_column(String(255), nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    curriculum: Mapped[Curriculum] = relationship("Curriculum", back_populates="contacts")


class Address(Base):
    """Postal address."""

    __tablename__ = "addresses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    curriculum_id: Mapped[uuid.UUID] = _curriculum_fk()
    street: Mapped[str] = mapped_column(String(255), nullable=False)
    number: Mapped[str] = mapped_column(String(20), nullable=False)
    complement: Mapped[str | None] = mapped_column(String(100), nullable=True)
    neighborhood: Mapped[str] = mapped_column(String(100), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(50), nullable=False)
    country: Mapped[str | None] = mapped_column(String(50), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    type: Mapped[AddressType] = mapped_column(
        _enum_column(AddressType, "address_type"), nullable=False
    )

    curriculum: Mapped[Curriculum] = relationship("Curriculum", back_populates="addresses")
