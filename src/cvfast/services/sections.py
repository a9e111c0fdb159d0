"""Section service for curriculum entries.

This service provides CRUD operations for the six curriculum sections
(experiences, educations, skills, languages, contacts, addresses). Each
section is described by a ``Section`` record; the operations are shared.
Every write publishes ``CurriculumChanged`` so the parent's ``updated_at``
moves with it.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cvfast.data.db import Base, get_session
from cvfast.data.models import (
    Address,
    Contact,
    Curriculum,
    Education,
    Experience,
    Language,
    Skill,
)
from cvfast.services.events import CurriculumChanged, publish

logger = logging.getLogger(__name__)

__all__ = [
    "SECTIONS",
    "Section",
    "create_section_item",
    "delete_section_item",
    "get_owned_curriculum",
    "get_section",
    "get_section_item",
    "list_section_items",
    "section_item_to_dict",
    "update_section_item",
]


@dataclass(frozen=True)
class Section:
    """How one curriculum section is stored and ordered.

    Attributes:
        name: URL segment and projection key (e.g. "experiences").
        attribute: Relationship name on Curriculum.
        model: ORM model class.
        fields: Writable columns.
        required: Columns that must be present on create.
        sort_key: Display ordering for items.
    """

    name: str
    attribute: str
    model: type[Base]
    fields: tuple[str, ...]
    required: tuple[str, ...]
    sort_key: Callable[[Any], Any]


def _most_recent_first(item: Any) -> tuple:
    return (-item.start_date.toordinal(), str(item.id))


SECTIONS: dict[str, Section] = {
    section.name: section
    for section in (
        Section(
            name="experiences",
            attribute="experiences",
            model=Experience,
            fields=("company_name", "role", "description", "start_date", "end_date", "location"),
            required=("company_name", "role", "start_date"),
            sort_key=_most_recent_first,
        ),
        Section(
            name="educations",
            attribute="educations",
            model=Education,
            fields=(
                "institution",
                "degree",
                "field_of_study",
                "start_date",
                "end_date",
                "description",
            ),
            required=("institution", "degree", "field_of_study", "start_date"),
            sort_key=_most_recent_first,
        ),
        Section(
            name="skills",
            attribute="skills",
            model=Skill,
            fields=("tech_name", "proficiency"),
            required=("tech_name", "proficiency"),
            sort_key=lambda s: (s.tech_name.lower(), str(s.id)),
        ),
        Section(
            name="languages",
            attribute="languages",
            model=Language,
            fields=("language_name", "proficiency"),
            required=("language_name", "proficiency"),
            sort_key=lambda lang: (lang.language_name.lower(), str(lang.id)),
        ),
        Section(
            name="contacts",
            attribute="contacts",
            model=Contact,
            fields=("type", "value", "is_primary"),
            required=("type", "value"),
            sort_key=lambda c: (not c.is_primary, str(c.type), str(c.id)),
        ),
        Section(
            name="addresses",
            attribute="addresses",
            model=Address,
            fields=(
                "street",
                "number",
                "complement",
                "neighborhood",
                "city",
                "state",
                "country",
                "zip_code",
                "type",
            ),
            required=("street", "number", "neighborhood", "city", "state", "type"),
            sort_key=lambda a: (str(a.type), a.city.lower(), str(a.id)),
        ),
    )
}


def get_section(name: str) -> Section:
    """Look up a section by name.

    Raises:
        KeyError: If ``name`` is not a known section.
    """
    return SECTIONS[name]


def section_item_to_dict(section: Section, item: Any) -> dict:
    """Convert a section model instance to a dictionary."""
    data = {"id": item.id, "curriculum_id": item.curriculum_id}
    for field in section.fields:
        data[field] = getattr(item, field)
    return data


def get_owned_curriculum(
    session: Session, owner_id: uuid.UUID, curriculum_id: uuid.UUID
) -> Curriculum | None:
    """Get a curriculum by ID, ensuring it belongs to ``owner_id``."""
    return (
        session.query(Curriculum)
        .filter(Curriculum.id == curriculum_id, Curriculum.user_id == owner_id)
        .first()
    )


def _get_item(session: Session, section: Section, curriculum_id: uuid.UUID, item_id: uuid.UUID):
    model = section.model
    return (
        session.query(model)
        .filter(model.id == item_id, model.curriculum_id == curriculum_id)
        .first()
    )


def _validate_item_data(data: dict) -> str | None:
    """Validate cross-field rules.

    Returns:
        Error message if validation fails, None if valid
    """
    start_date = data.get("start_date")
    end_date = data.get("end_date")
    if start_date and end_date and end_date < start_date:
        return "end_date cannot be before start_date"
    return None


def _demote_other_primary_contacts(session: Session, contact: Contact) -> None:
    """Keep at most one primary contact per type within a curriculum."""
    others = (
        session.query(Contact)
        .filter(
            Contact.curriculum_id == contact.curriculum_id,
            Contact.type == contact.type,
            Contact.is_primary.is_(True),
            Contact.id != contact.id,
        )
        .all()
    )
    for other in others:
        other.is_primary = False


def _apply_updates(section: Section, item: Any, data: dict) -> None:
    for field in section.fields:
        if field in data:
            setattr(item, field, data[field])


def list_section_items(
    section_name: str, owner_id: uuid.UUID, curriculum_id: uuid.UUID
) -> list[dict] | None:
    """List a section's items for a curriculum.

    Returns:
        List of item dictionaries, or None if the curriculum is missing or
        belongs to someone else.
    """
    section = get_section(section_name)
    with get_session() as session:
        curriculum = get_owned_curriculum(session, owner_id, curriculum_id)
        if curriculum is None:
            return None
        items = sorted(getattr(curriculum, section.attribute), key=section.sort_key)
        return [section_item_to_dict(section, item) for item in items]


def get_section_item(
    section_name: str, owner_id: uuid.UUID, curriculum_id: uuid.UUID, item_id: uuid.UUID
) -> dict | None:
    """Get one section item, or None if it (or its curriculum) is not found."""
    section = get_section(section_name)
    with get_session() as session:
        if get_owned_curriculum(session, owner_id, curriculum_id) is None:
            return None
        item = _get_item(session, section, curriculum_id, item_id)
        return section_item_to_dict(section, item) if item else None


def create_section_item(
    section_name: str, owner_id: uuid.UUID, curriculum_id: uuid.UUID, data: dict
) -> dict | None:
    """Create a section item.

    Args:
        section_name: One of ``SECTIONS``.
        owner_id: Authenticated user; must own the curriculum.
        curriculum_id: Parent curriculum.
        data: Field values; the section's required fields must be present.

    Returns:
        Dictionary with the created item, or None if the data is invalid or
        the curriculum is not found.
    """
    section = get_section(section_name)
    missing = [field for field in section.required if data.get(field) is None]
    if missing:
        logger.warning("Missing %s fields: %s", section_name, ", ".join(missing))
        return None

    validation_error = _validate_item_data(data)
    if validation_error:
        logger.warning("Validation failed for %s: %s", section_name, validation_error)
        return None

    try:
        with get_session() as session:
            if get_owned_curriculum(session, owner_id, curriculum_id) is None:
                return None

            item = section.model(id=uuid.uuid4(), curriculum_id=curriculum_id)
            _apply_updates(section, item, data)
            if isinstance(item, Contact) and item.is_primary:
                _demote_other_primary_contacts(session, item)

            session.add(item)
            publish(session, CurriculumChanged(curriculum_id))
            session.commit()

            return section_item_to_dict(section, item)

    except SQLAlchemyError:
        logger.exception("Failed to create %s item for curriculum %s", section_name, curriculum_id)
        raise


def update_section_item(
    section_name: str,
    owner_id: uuid.UUID,
    curriculum_id: uuid.UUID,
    item_id: uuid.UUID,
    data: dict,
) -> dict | None:
    """Partially update a section item; only keys present in ``data`` change.

    Returns:
        Dictionary with the updated item, or None if not found or invalid.
    """
    section = get_section(section_name)
    try:
        with get_session() as session:
            if get_owned_curriculum(session, owner_id, curriculum_id) is None:
                return None

            item = _get_item(session, section, curriculum_id, item_id)
            if item is None:
                return None

            # Null for a required field means "leave unchanged"
            changes = {
                field: value
                for field, value in data.items()
                if field in section.fields and not (value is None and field in section.required)
            }
            merged = {field: getattr(item, field) for field in section.fields}
            merged.update(changes)
            validation_error = _validate_item_data(merged)
            if validation_error:
                logger.warning(
                    "Validation failed for %s update: %s", section_name, validation_error
                )
                return None

            became_primary = changes.get("is_primary") is True and not getattr(
                item, "is_primary", False
            )
            _apply_updates(section, item, changes)
            if became_primary:
                _demote_other_primary_contacts(session, item)

            publish(session, CurriculumChanged(curriculum_id))
            session.commit()

            return section_item_to_dict(section, item)

    except SQLAlchemyError:
        logger.exception("Failed to update %s item %s", section_name, item_id)
        raise


def delete_section_item(
    section_name: str, owner_id: uuid.UUID, curriculum_id: uuid.UUID, item_id: uuid.UUID
) -> bool:
    """Delete a section item.

    Returns:
        True if deleted, False if the item or curriculum is not found
    """
    section = get_section(section_name)
    try:
        with get_session() as session:
            if get_owned_curriculum(session, owner_id, curriculum_id) is None:
                return False

            item = _get_item(session, section, curriculum_id, item_id)
            if item is None:
                return False

            session.delete(item)
            publish(session, CurriculumChanged(curriculum_id))
            session.commit()
            return True

    except SQLAlchemyError:
        logger.exception("Failed to delete %s item %s", section_name, item_id)
        raise
