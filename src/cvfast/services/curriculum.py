"""Curriculum service: owner-scoped CRUD and the full résumé projection.

Creating a curriculum also issues its first short link in the same
transaction; if the link cannot be stored the curriculum is rolled back.
"""

from __future__ import annotations

import logging
import uuid
from typing import TypedDict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from cvfast import clock
from cvfast.data.db import get_session
from cvfast.data.models import Curriculum, CurriculumStatus, ShortLink
from cvfast.services.events import CurriculumChanged, publish
from cvfast.services.hash_generator import generate_hash
from cvfast.services.sections import SECTIONS, get_owned_curriculum, section_item_to_dict
from cvfast.services.short_links import HashFactory, add_short_link

logger = logging.getLogger(__name__)

__all__ = [
    "CurriculumData",
    "create_curriculum",
    "curriculum_to_detail_dict",
    "delete_curriculum",
    "get_curriculum",
    "get_curriculum_detail",
    "get_owned_curriculum",
    "list_curriculums",
    "load_complete_curriculum",
    "short_link_to_dict",
    "update_curriculum",
]

_CURRICULUM_FIELDS = ("title", "summary", "status")


class CurriculumData(TypedDict, total=False):
    """TypedDict for curriculum data."""

    title: str
    summary: str | None
    status: CurriculumStatus


def _curriculum_to_dict(curriculum: Curriculum) -> dict:
    return {
        "id": curriculum.id,
        "user_id": curriculum.user_id,
        "title": curriculum.title,
        "summary": curriculum.summary,
        "status": curriculum.status,
        "created_at": curriculum.created_at,
        "updated_at": curriculum.updated_at,
    }


def short_link_to_dict(short_link: ShortLink) -> dict:
    """Convert a ShortLink model to a dictionary."""
    return {
        "id": short_link.id,
        "curriculum_id": short_link.curriculum_id,
        "hash": short_link.hash,
        "is_revoked": short_link.is_revoked,
        "created_at": short_link.created_at,
        "revoked_at": short_link.revoked_at,
    }


def curriculum_to_detail_dict(curriculum: Curriculum, *, active_links_only: bool) -> dict:
    """Build the full projection: curriculum fields, every section and its short links.

    Args:
        curriculum: Curriculum with its relationships loadable.
        active_links_only: Drop revoked short links (used for anonymous reads).
    """
    detail = _curriculum_to_dict(curriculum)
    for section in SECTIONS.values():
        items = sorted(getattr(curriculum, section.attribute), key=section.sort_key)
        detail[section.name] = [section_item_to_dict(section, item) for item in items]

    links = sorted(curriculum.short_links, key=lambda link: (link.created_at, link.hash))
    if active_links_only:
        links = [link for link in links if not link.is_revoked]
    detail["short_links"] = [short_link_to_dict(link) for link in links]
    return detail


def _complete_query(session: Session):
    options = [selectinload(getattr(Curriculum, s.attribute)) for s in SECTIONS.values()]
    options.append(selectinload(Curriculum.short_links))
    return session.query(Curriculum).options(*options)


def load_complete_curriculum(session: Session, curriculum_id: uuid.UUID) -> Curriculum | None:
    """Load a curriculum with every section and short link eagerly."""
    return _complete_query(session).filter(Curriculum.id == curriculum_id).first()


def create_curriculum(
    owner_id: uuid.UUID,
    curriculum_data: CurriculumData,
    *,
    hash_factory: HashFactory = generate_hash,
) -> dict | None:
    """Create a curriculum together with its first short link.

    Args:
        owner_id: ID of the owning user.
        curriculum_data: Must include 'title'.
        hash_factory: Hash source for the implicit short link.

    Returns:
        Detail dictionary including the new short link, or None if the title
        is missing.

    Raises:
        ShortLinkConflictError: If no unique hash could be stored for the
            implicit short link; the curriculum is rolled back too.
        SQLAlchemyError: If the store fails; nothing is persisted.
    """
    if not curriculum_data.get("title"):
        return None

    try:
        with get_session() as session:
            now = clock.now()
            curriculum = Curriculum(
                user_id=owner_id,
                title=curriculum_data["title"],
                summary=curriculum_data.get("summary"),
                status=curriculum_data.get("status") or CurriculumStatus.DRAFT,
                created_at=now,
                updated_at=now,
            )
            session.add(curriculum)
            session.flush()

            short_link = add_short_link(session, curriculum.id, hash_factory=hash_factory)
            session.commit()

            logger.info(
                "Curriculum %s created for user %s with short link %s",
                curriculum.id,
                owner_id,
                short_link.hash,
            )
            return curriculum_to_detail_dict(
                load_complete_curriculum(session, curriculum.id), active_links_only=False
            )

    except SQLAlchemyError:
        logger.exception("Failed to create curriculum for user %s", owner_id)
        raise


def list_curriculums(owner_id: uuid.UUID) -> list[dict]:
    """List a user's curricula, most recently updated first."""
    with get_session() as session:
        curriculums = (
            session.query(Curriculum)
            .filter(Curriculum.user_id == owner_id)
            .order_by(Curriculum.updated_at.desc())
            .all()
        )
        return [_curriculum_to_dict(c) for c in curriculums]


def get_curriculum(owner_id: uuid.UUID, curriculum_id: uuid.UUID) -> dict | None:
    """Get a curriculum's own fields, or None if missing or not owned."""
    with get_session() as session:
        curriculum = get_owned_curriculum(session, owner_id, curriculum_id)
        return _curriculum_to_dict(curriculum) if curriculum else None


def get_curriculum_detail(owner_id: uuid.UUID, curriculum_id: uuid.UUID) -> dict | None:
    """Get the owner's full projection, revoked short links included."""
    with get_session() as session:
        curriculum = (
            _complete_query(session)
            .filter(Curriculum.id == curriculum_id, Curriculum.user_id == owner_id)
            .first()
        )
        if curriculum is None:
            return None
        return curriculum_to_detail_dict(curriculum, active_links_only=False)


def update_curriculum(
    owner_id: uuid.UUID, curriculum_id: uuid.UUID, curriculum_data: CurriculumData
) -> dict | None:
    """Apply a partial update; only keys present in ``curriculum_data`` change.

    Returns:
        Updated curriculum dictionary, or None if missing or not owned.
    """
    try:
        with get_session() as session:
            curriculum = get_owned_curriculum(session, owner_id, curriculum_id)
            if curriculum is None:
                return None

            for field in _CURRICULUM_FIELDS:
                if field in curriculum_data and curriculum_data[field] is not None:
                    setattr(curriculum, field, curriculum_data[field])
            if "summary" in curriculum_data and curriculum_data["summary"] is None:
                curriculum.summary = None

            publish(session, CurriculumChanged(curriculum.id))
            session.commit()

            logger.info("Curriculum %s updated", curriculum_id)
            return _curriculum_to_dict(curriculum)

    except SQLAlchemyError:
        logger.exception("Failed to update curriculum %s", curriculum_id)
        raise


def delete_curriculum(owner_id: uuid.UUID, curriculum_id: uuid.UUID) -> bool:
    """Delete a curriculum with its sections, short links and access logs."""
    try:
        with get_session() as session:
            curriculum = get_owned_curriculum(session, owner_id, curriculum_id)
            if curriculum is None:
                return False

            session.delete(curriculum)
            session.commit()

        logger.info("Curriculum %s deleted", curriculum_id)
        return True

    except SQLAlchemyError:
        logger.exception("Failed to delete curriculum %s", curriculum_id)
        raise
