"""User account model for authentication.

Passwords are stored as salted PBKDF2 hashes, never in plaintext.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cvfast import clock
from cvfast.data.db import Base

if TYPE_CHECKING:
    from cvfast.data.models.curriculum import Curriculum


class User(Base):
    """Application user account.

    Attributes:
        id: Generated UUID primary key.
        email: Unique login identifier, stored lower-cased.
        name: Display name.
        password_hash: Salted hash of the user's password.
        created_at: UTC timestamp when the account was created.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=clock.now
    )

    curriculums: Mapped[list[Curriculum]] = relationship(
        "Curriculum", back_populates="user", cascade="all, delete-orphan"
    )
