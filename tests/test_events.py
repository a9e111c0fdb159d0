"""Tests for curriculum change events."""

from __future__ import annotations

import uuid

from cvfast.data.db import get_session
from cvfast.data.models import Curriculum
from cvfast.services.curriculum import create_curriculum
from cvfast.services.events import CurriculumChanged, publish, subscribe, unsubscribe


def test_publish_dispatches_to_subscribers_in_session(owner_id, fixed_clock):
    curriculum_id = create_curriculum(owner_id, {"title": "Event Sourced"})["id"]
    seen = []

    def record(session, event):
        seen.append((session, event))

    subscribe(record)
    try:
        touched_at = fixed_clock.advance(minutes=3)
        with get_session() as session:
            publish(session, CurriculumChanged(curriculum_id))
            assert seen == [(session, CurriculumChanged(curriculum_id))]
    finally:
        unsubscribe(record)

    with get_session() as session:
        stored = session.get(Curriculum, curriculum_id)
        assert stored.updated_at.replace(tzinfo=None) == touched_at.replace(tzinfo=None)

    with get_session() as session:
        publish(session, CurriculumChanged(curriculum_id))
    assert len(seen) == 1


def test_touch_ignores_missing_curriculum(tmp_db, fixed_clock):
    with get_session() as session:
        publish(session, CurriculumChanged(uuid.uuid4()))
