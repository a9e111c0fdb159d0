"""Test suite for resolving short link hashes to curricula."""

from __future__ import annotations

import uuid

import pytest

from cvfast.data.models import CurriculumStatus, SkillProficiency
from cvfast.services.access_log import list_access_logs
from cvfast.services.curriculum import create_curriculum
from cvfast.services.resolution import resolve_hash
from cvfast.services.sections import create_section_item
from cvfast.services.short_links import create_short_link, revoke_short_link


@pytest.fixture
def curriculum(owner_id, fixed_clock):
    return create_curriculum(
        owner_id,
        {
            "title": "Platform Engineer",
            "summary": "Builds things",
            "status": CurriculumStatus.ACTIVE,
        },
    )


def test_resolve_active_hash_returns_full_projection(owner_id, curriculum):
    skill = {"tech_name": "Python", "proficiency": SkillProficiency.EXPERT}
    create_section_item("skills", owner_id, curriculum["id"], skill)
    link = curriculum["short_links"][0]

    resolution = resolve_hash(link["hash"])

    assert resolution is not None
    assert resolution.short_link_id == link["id"]
    detail = resolution.curriculum
    assert detail["id"] == curriculum["id"]
    assert detail["title"] == "Platform Engineer"
    assert [s["tech_name"] for s in detail["skills"]] == ["Python"]
    for section in ("experiences", "educations", "languages", "contacts", "addresses"):
        assert detail[section] == []


def test_resolution_lists_only_active_links(curriculum, fixed_clock):
    first = curriculum["short_links"][0]
    fixed_clock.advance(minutes=1)
    second = create_short_link(curriculum["id"])
    revoke_short_link(first["id"])

    resolution = resolve_hash(second.hash)

    assert [link["hash"] for link in resolution.curriculum["short_links"]] == [second.hash]


def test_unknown_revoked_and_malformed_hashes_resolve_to_none(curriculum):
    link = curriculum["short_links"][0]
    revoke_short_link(link["id"])

    assert resolve_hash(link["hash"]) is None
    assert resolve_hash("Unknown1") is None
    assert resolve_hash("bad/hash") is None
    assert resolve_hash("") is None


def test_resolution_does_not_record_access(curriculum):
    """Recording is the caller's job, after a successful resolution."""
    link = curriculum["short_links"][0]

    resolve_hash(link["hash"])

    assert list_access_logs(link["id"]) == []


def test_hidden_curriculum_resolves_for_owner_only(owner_id, fixed_clock):
    hidden = create_curriculum(owner_id, {"title": "Private CV", "status": CurriculumStatus.HIDDEN})
    hash_value = hidden["short_links"][0]["hash"]

    assert resolve_hash(hash_value) is None
    assert resolve_hash(hash_value, uuid.uuid4()) is None
    owned = resolve_hash(hash_value, owner_id)
    assert owned is not None
    assert owned.curriculum["title"] == "Private CV"


@pytest.mark.parametrize(
    "status",
    [CurriculumStatus.DRAFT, CurriculumStatus.ACTIVE, CurriculumStatus.ARCHIVED],
)
def test_non_hidden_statuses_resolve_for_anyone(owner_id, status):
    created = create_curriculum(owner_id, {"title": f"{status} CV", "status": status})

    assert resolve_hash(created["short_links"][0]["hash"]) is not None
