"""Link registry: the authoritative store of hash -> curriculum mappings.

Unknown and revoked hashes are indistinguishable to callers of
``get_active_by_hash``; both yield None.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cvfast import clock
from cvfast.data.db import get_session
from cvfast.data.models import Curriculum, ShortLink
from cvfast.services.errors import NotFoundError, ShortLinkConflictError
from cvfast.services.events import CurriculumChanged, publish
from cvfast.services.hash_generator import generate_hash

logger = logging.getLogger(__name__)

__all__ = [
    "HashFactory",
    "MAX_HASH_ATTEMPTS",
    "add_short_link",
    "create_short_link",
    "get_active_by_hash",
    "get_owned_short_link",
    "get_short_link",
    "list_by_curriculum",
    "revoke_short_link",
]

HashFactory = Callable[[uuid.UUID], str]

MAX_HASH_ATTEMPTS = 5


def _hash_taken(session: Session, candidate: str) -> bool:
    return session.query(ShortLink.id).filter(ShortLink.hash == candidate).first() is not None


def _unique_hash(session: Session, curriculum_id: uuid.UUID, hash_factory: HashFactory) -> str:
    for attempt in range(1, MAX_HASH_ATTEMPTS + 1):
        candidate = hash_factory(curriculum_id)
        if not _hash_taken(session, candidate):
            return candidate
        logger.warning(
            "Hash collision on attempt %d/%d for curriculum %s",
            attempt,
            MAX_HASH_ATTEMPTS,
            curriculum_id,
        )
    raise ShortLinkConflictError(
        f"Could not generate a unique hash after {MAX_HASH_ATTEMPTS} attempts"
    )


def add_short_link(
    session: Session,
    curriculum_id: uuid.UUID,
    *,
    hash_factory: HashFactory = generate_hash,
) -> ShortLink:
    """Insert a new active short link inside an existing session.

    The caller owns the transaction, which lets curriculum creation and its
    implicit link commit or roll back together. The row is flushed so a
    unique-index violation surfaces here rather than at commit.

    Raises:
        ShortLinkConflictError: If no free hash was found, or the unique
            index rejected the insert.
    """
    short_link = ShortLink(
        curriculum_id=curriculum_id,
        hash=_unique_hash(session, curriculum_id, hash_factory),
        is_revoked=False,
        created_at=clock.now(),
    )
    session.add(short_link)
    try:
        session.flush()
    except IntegrityError as exc:
        raise ShortLinkConflictError(f"Hash {short_link.hash!r} is already in use") from exc
    return short_link


def create_short_link(
    curriculum_id: uuid.UUID,
    *,
    hash_factory: HashFactory = generate_hash,
) -> ShortLink:
    """Create an additional short link for an existing curriculum.

    Args:
        curriculum_id: Curriculum the link will resolve to.
        hash_factory: Hash source, replaceable in tests.

    Returns:
        The persisted ShortLink.

    Raises:
        NotFoundError: If the curriculum does not exist.
        ShortLinkConflictError: If no unique hash could be stored.
    """
    with get_session() as session:
        if session.get(Curriculum, curriculum_id) is None:
            raise NotFoundError(f"Curriculum {curriculum_id} not found")

        short_link = add_short_link(session, curriculum_id, hash_factory=hash_factory)
        publish(session, CurriculumChanged(curriculum_id))

    logger.info("Short link %s created for curriculum %s", short_link.id, curriculum_id)
    return short_link


def get_active_by_hash(hash_value: str) -> ShortLink | None:
    """Return the short link for ``hash_value`` if it exists and is not revoked."""
    with get_session() as session:
        return (
            session.query(ShortLink)
            .filter(ShortLink.hash == hash_value, ShortLink.is_revoked.is_(False))
            .first()
        )


def get_short_link(short_link_id: uuid.UUID) -> ShortLink | None:
    """Return a short link by id regardless of revocation state."""
    with get_session() as session:
        return session.get(ShortLink, short_link_id)


def get_owned_short_link(short_link_id: uuid.UUID, owner_id: uuid.UUID) -> ShortLink | None:
    """Return a short link only if its curriculum belongs to ``owner_id``."""
    with get_session() as session:
        return (
            session.query(ShortLink)
            .join(Curriculum, Curriculum.id == ShortLink.curriculum_id)
            .filter(ShortLink.id == short_link_id, Curriculum.user_id == owner_id)
            .first()
        )


def revoke_short_link(short_link_id: uuid.UUID) -> bool:
    """Revoke a short link.

    Revocation is one-way. Revoking an already revoked link changes nothing
    and still reports success.

    Returns:
        False if the link does not exist, True otherwise.
    """
    with get_session() as session:
        short_link = session.get(ShortLink, short_link_id)
        if short_link is None:
            return False

        if short_link.is_revoked:
            logger.debug(
                "Short link %s already revoked at %s", short_link_id, short_link.revoked_at
            )
            return True

        short_link.is_revoked = True
        short_link.revoked_at = clock.now()
        publish(session, CurriculumChanged(short_link.curriculum_id))

    logger.info("Short link %s revoked", short_link_id)
    return True


def list_by_curriculum(curriculum_id: uuid.UUID) -> list[ShortLink]:
    """Return every short link of a curriculum, active and revoked, oldest first."""
    with get_session() as session:
        return (
            session.query(ShortLink)
            .filter(ShortLink.curriculum_id == curriculum_id)
            .order_by(ShortLink.created_at, ShortLink.hash)
            .all()
        )
