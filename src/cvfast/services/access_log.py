"""Access recorder: append-only log of short link resolutions."""

from __future__ import annotations

import logging
import uuid

from cvfast import clock
from cvfast.data.db import get_session
from cvfast.data.models import AccessLog
from cvfast.data.models.short_link import IP_MAX_LENGTH, USER_AGENT_MAX_LENGTH

logger = logging.getLogger(__name__)

UNKNOWN_IP = "Unknown"


def record_access(short_link_id: uuid.UUID, ip: str | None, user_agent: str | None) -> AccessLog:
    """Insert an access log row stamped with the current time.

    Both values are cut to their column length so oversized headers still
    produce a row.

    Args:
        short_link_id: The resolved short link.
        ip: Client address; ``UNKNOWN_IP`` is stored when missing.
        user_agent: Client user agent; empty values are stored as None.

    Returns:
        The persisted AccessLog.
    """
    access_log = AccessLog(
        short_link_id=short_link_id,
        ip=(ip or UNKNOWN_IP)[:IP_MAX_LENGTH],
        user_agent=user_agent[:USER_AGENT_MAX_LENGTH] if user_agent else None,
        accessed_at=clock.now(),
    )
    with get_session() as session:
        session.add(access_log)

    logger.info("Access recorded for short link %s from %s", short_link_id, access_log.ip)
    return access_log


def record_access_safely(
    short_link_id: uuid.UUID, ip: str | None, user_agent: str | None
) -> AccessLog | None:
    """Record an access without ever raising.

    Access logging is best-effort: a failure is logged and swallowed so the
    résumé read path is never affected.
    """
    try:
        return record_access(short_link_id, ip, user_agent)
    except Exception:
        logger.exception("Failed to record access for short link %s", short_link_id)
        return None


def list_access_logs(short_link_id: uuid.UUID) -> list[AccessLog]:
    """Return the access logs of a short link, oldest first."""
    with get_session() as session:
        return (
            session.query(AccessLog)
            .filter(AccessLog.short_link_id == short_link_id)
            .order_by(AccessLog.accessed_at)
            .all()
        )
