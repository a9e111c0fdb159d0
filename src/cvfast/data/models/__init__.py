"""ORM models package for database tables.

This package provides SQLAlchemy ORM models representing database tables:
- User: Registered account that owns curricula
- Curriculum: A résumé and its publication status
- Experience, Education, Skill, Language, Contact, Address: Curriculum sections
- ShortLink: Hash alias used to share a curriculum
- AccessLog: Append-only record of short link resolutions

All models inherit from the shared Base declarative class defined in data.db.
"""

from cvfast.data.db import Base
from cvfast.data.models.curriculum import Curriculum, CurriculumStatus
from cvfast.data.models.sections import (
    Address,
    AddressType,
    Contact,
    ContactType,
    Education,
    Experience,
    Language,
    LanguageProficiency,
    Skill,
    SkillProficiency,
)
from cvfast.data.models.short_link import AccessLog, ShortLink
from cvfast.data.models.user import User

__all__ = [
    "AccessLog",
    "Address",
    "AddressType",
    "Base",
    "Contact",
    "ContactType",
    "Curriculum",
    "CurriculumStatus",
    "Education",
    "Experience",
    "Language",
    "LanguageProficiency",
    "ShortLink",
    "Skill",
    "SkillProficiency",
    "User",
]
