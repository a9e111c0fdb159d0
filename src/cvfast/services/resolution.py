"""Resolution gateway: turns a short link hash into curriculum data.

Unknown hashes, revoked hashes and curricula hidden from the caller all
resolve to None, so callers cannot tell which case occurred. Access
recording is left to the caller, after a successful resolution.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from cvfast.data.db import get_session
from cvfast.data.models import Curriculum, CurriculumStatus
from cvfast.services.curriculum import curriculum_to_detail_dict, load_complete_curriculum
from cvfast.services.hash_generator import is_valid_hash
from cvfast.services.short_links import get_active_by_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """A successful resolution.

    Attributes:
        short_link_id: The link that was resolved; used to record the access.
        curriculum: Full projection with revoked short links filtered out.
    """

    short_link_id: uuid.UUID
    curriculum: dict


def is_visible_to(curriculum: Curriculum, viewer_id: uuid.UUID | None) -> bool:
    """Whether ``viewer_id`` (None for anonymous) may see ``curriculum`` via a short link.

    Hidden curricula are visible to their owner only. Draft, Active and
    Archived curricula are visible to anyone holding an active link.
    """
    if curriculum.status == CurriculumStatus.HIDDEN:
        return viewer_id is not None and viewer_id == curriculum.user_id
    return True


def resolve_hash(hash_value: str, viewer_id: uuid.UUID | None = None) -> Resolution | None:
    """Resolve ``hash_value`` for a viewer.

    Args:
        hash_value: Token from the share URL.
        viewer_id: Authenticated user, or None for anonymous callers.

    Returns:
        Resolution, or None when the link is unknown, revoked or the
        curriculum is not visible to the viewer.
    """
    if not is_valid_hash(hash_value):
        return None

    short_link = get_active_by_hash(hash_value)
    if short_link is None:
        return None

    with get_session() as session:
        curriculum = load_complete_curriculum(session, short_link.curriculum_id)
        if curriculum is None or not is_visible_to(curriculum, viewer_id):
            logger.debug("Short link %s resolved to a curriculum hidden from caller", hash_value)
            return None

        return Resolution(
            short_link_id=short_link.id,
            curriculum=curriculum_to_detail_dict(curriculum, active_links_only=True),
        )
