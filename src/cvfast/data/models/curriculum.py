"""Curriculum (résumé) aggregate root.

A curriculum belongs to one user and owns its section entries and short links.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cvfast import clock
from cvfast.data.db import Base

if TYPE_CHECKING:
    from cvfast.data.models.sections import (
        Address,
        Contact,
        Education,
        Experience,
        Language,
        Skill,
    )
    from cvfast.data.models.short_link import ShortLink
    from cvfast.data.models.user import User


class CurriculumStatus(StrEnum):
    """Publication state of a curriculum."""

    DRAFT = "Draft"
    ACTIVE = "Active"
    HIDDEN = "Hidden"
    ARCHIVED = "Archived"


class Curriculum(Base):
    """A user's résumé.

    Attributes:
        id: Generated UUID primary key.
        user_id: Owner of the résumé.
        title: Résumé title.
        summary: Free-text professional summary.
        status: Visibility state; Hidden résumés resolve only for their owner.
        created_at: UTC timestamp of creation.
        updated_at: UTC timestamp of the last change to the résumé or any child.
    """

    __tablename__ = "curriculums"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[CurriculumStatus] = mapped_column(
        Enum(
            CurriculumStatus,
            name="curriculum_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=CurriculumStatus.DRAFT,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=clock.now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=clock.now
    )

    # Relationships
    user: Mapped[User] = relationship("User", back_populates="curriculums")
    experiences: Mapped[list[Experience]] = relationship(
        "Experience", back_populates="curriculum", cascade="all, delete-orphan"
    )
    educations: Mapped[list[Education]] = relationship(
        "Education", back_populates="curriculum", cascade="all, delete-orphan"
    )
    skills: Mapped[list[Skill]] = relationship(
        "Skill", back_populates="curriculum", cascade="all, delete-orphan"
    )
    languages: Mapped[list[Language]] = relationship(
        "Language", back_populates="curriculum", cascade="all, delete-orphan"
    )
    contacts: Mapped[list[Contact]] = relationship(
        "Contact", back_populates="curriculum", cascade="all, delete-orphan"
    )
    addresses: Mapped[list[Address]] = relationship(
        "Address", back_populates="curriculum", cascade="all, delete-orphan"
    )
    short_links: Mapped[list[ShortLink]] = relationship(
        "ShortLink",
        back_populates="curriculum",
        cascade="all, delete-orphan",
        order_by="ShortLink.created_at",
    )
