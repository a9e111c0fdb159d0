"""Short links used to share a curriculum, and their access log.

A short link maps an 8-character hash to a curriculum. Revocation is a
one-way transition: ``revoked_at`` is set exactly when ``is_revoked`` flips
to True. Access logs are append-only.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cvfast import clock
from cvfast.data.db import Base

if TYPE_CHECKING:
    from cvfast.data.models.curriculum import Curriculum

IP_MAX_LENGTH = 64
USER_AGENT_MAX_LENGTH = 512


class ShortLink(Base):
    """Shareable alias for a curriculum.

    Attributes:
        id: Generated UUID primary key.
        curriculum_id: The curriculum this link resolves to.
        hash: Unique 8-character URL-safe token; immutable.
        is_revoked: True once the link has been revoked.
        created_at: UTC timestamp of creation; immutable.
        revoked_at: UTC timestamp of revocation, None while active.
    """

    __tablename__ = "short_links"
    __table_args__ = (
        CheckConstraint(
            "(is_revoked AND revoked_at IS NOT NULL) OR (NOT is_revoked AND revoked_at IS NULL)",
            name="ck_short_links_revoked_at_matches_flag",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    curriculum_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("curriculums.id", ondelete="CASCADE"), nullable=False, index=True
    )
    hash: Mapped[str] = mapped_column(String(8), unique=True, nullable=False, index=True)
    is_revoked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=clock.now
    )
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    curriculum: Mapped[Curriculum] = relationship("Curriculum", back_populates="short_links")
    access_logs: Mapped[list[AccessLog]] = relationship(
        "AccessLog",
        back_populates="short_link",
        cascade="all, delete-orphan",
        order_by="AccessLog.accessed_at",
    )


class AccessLog(Base):
    """One successful resolution of a short link."""

    __tablename__ = "access_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    short_link_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("short_links.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ip: Mapped[str] = mapped_column(String(IP_MAX_LENGTH), nullable=False)
    user_agent: Mapped[str | None] = mapped_column(
        String(USER_AGENT_MAX_LENGTH), nullable=True
    )
    accessed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=clock.now
    )

    short_link: Mapped[ShortLink] = relationship("ShortLink", back_populates="access_logs")
