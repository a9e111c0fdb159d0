"""In-process domain events.

Writes to a curriculum's children (sections, short links) publish
``CurriculumChanged`` inside the writer's session. The single subscribed
handler bumps the parent's ``updated_at``, so the change and the touch
commit or roll back together.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.orm import Session

from cvfast import clock
from cvfast.data.models import Curriculum

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurriculumChanged:
    """A child entity of ``curriculum_id`` was created, updated or deleted."""

    curriculum_id: uuid.UUID


Handler = Callable[[Session, CurriculumChanged], None]

_handlers: list[Handler] = []


def subscribe(handler: Handler) -> Handler:
    """Register ``handler`` for ``CurriculumChanged`` events. Usable as a decorator."""
    if handler not in _handlers:
        _handlers.append(handler)
    return handler


def unsubscribe(handler: Handler) -> None:
    if handler in _handlers:
        _handlers.remove(handler)


def publish(session: Session, event: CurriculumChanged) -> None:
    """Dispatch ``event`` synchronously to every handler using ``session``."""
    for handler in list(_handlers):
        handler(session, event)


@subscribe
def touch_curriculum(session: Session, event: CurriculumChanged) -> None:
    """Set the parent curriculum's ``updated_at`` to the current time."""
    curriculum = session.get(Curriculum, event.curriculum_id)
    if curriculum is None:
        logger.debug("Curriculum %s vanished before touch", event.curriculum_id)
        return
    curriculum.updated_at = clock.now()
