"""Curriculum section routes for the API.

Every section (experiences, educations, skills, languages, contacts,
addresses) exposes the same CRUD surface under
``/curriculums/{curriculum_id}/{section}``; the routes are registered per
section from ``SECTION_SCHEMAS``.
"""

# No postponed annotations here: FastAPI reads the endpoint signatures at
# registration time and they name classes local to _register_section.

import uuid
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status
from pydantic import BaseModel

from cvfast.api.dependencies import CurrentUserId
from cvfast.api.routes.short_links import CURRICULUM_NOT_FOUND
from cvfast.api.schemas.common import ApiResponse, ok
from cvfast.api.schemas.sections import SECTION_SCHEMAS
from cvfast.data.db import get_session
from cvfast.services.curriculum import get_owned_curriculum
from cvfast.services.sections import (
    create_section_item,
    delete_section_item,
    get_section_item,
    list_section_items,
    update_section_item,
)

router = APIRouter(prefix="/curriculums", tags=["sections"])

CurriculumId = Annotated[uuid.UUID, Path(description="Curriculum ID")]
ItemId = Annotated[uuid.UUID, Path(description="Section item ID")]

_LABELS = {
    "experiences": "Experience",
    "educations": "Education",
    "skills": "Skill",
    "languages": "Language",
    "contacts": "Contact",
    "addresses": "Address",
}


def _verify_curriculum_owner(current_user_id: uuid.UUID, curriculum_id: uuid.UUID) -> None:
    """Raise 404 unless the curriculum exists and belongs to the caller."""
    with get_session() as session:
        if get_owned_curriculum(session, current_user_id, curriculum_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=CURRICULUM_NOT_FOUND
            )


def _item_not_found(label: str, item_id: uuid.UUID) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{label} {item_id} not found",
    )


def _register_section(
    section_name: str,
    response_model: type[BaseModel],
    create_model: type[BaseModel],
    update_model: type[BaseModel],
) -> None:
    label = _LABELS[section_name]
    collection_path = f"/{{curriculum_id}}/{section_name}"
    item_path = f"{collection_path}/{{item_id}}"

    def list_items(
        curriculum_id: CurriculumId,
        current_user_id: CurrentUserId,
    ) -> ApiResponse[list[response_model]]:
        results = list_section_items(section_name, current_user_id, curriculum_id)
        if results is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=CURRICULUM_NOT_FOUND
            )
        return ok([response_model(**r) for r in results])

    def get_item(
        curriculum_id: CurriculumId,
        item_id: ItemId,
        current_user_id: CurrentUserId,
    ) -> ApiResponse[response_model]:
        _verify_curriculum_owner(current_user_id, curriculum_id)

        result = get_section_item(section_name, current_user_id, curriculum_id, item_id)
        if not result:
            raise _item_not_found(label, item_id)
        return ok(response_model(**result))

    def create_item(
        curriculum_id: CurriculumId,
        data: create_model,
        current_user_id: CurrentUserId,
    ) -> ApiResponse[response_model]:
        _verify_curriculum_owner(current_user_id, curriculum_id)

        result = create_section_item(
            section_name, current_user_id, curriculum_id, data.model_dump()
        )
        if not result:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Failed to create {label.lower()}",
            )
        return ok(response_model(**result), f"{label} created successfully")

    def update_item(
        curriculum_id: CurriculumId,
        item_id: ItemId,
        data: update_model,
        current_user_id: CurrentUserId,
    ) -> ApiResponse[response_model]:
        _verify_curriculum_owner(current_user_id, curriculum_id)

        update_dict = data.model_dump(exclude_unset=True)
        result = update_section_item(
            section_name, current_user_id, curriculum_id, item_id, update_dict
        )
        if not result:
            existing = get_section_item(section_name, current_user_id, curriculum_id, item_id)
            if not existing:
                raise _item_not_found(label, item_id)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Failed to update {label.lower()}. Check that dates are valid.",
            )
        return ok(response_model(**result), f"{label} updated successfully")

    def delete_item(
        curriculum_id: CurriculumId,
        item_id: ItemId,
        current_user_id: CurrentUserId,
    ) -> ApiResponse[None]:
        _verify_curriculum_owner(current_user_id, curriculum_id)

        if not delete_section_item(section_name, current_user_id, curriculum_id, item_id):
            raise _item_not_found(label, item_id)
        return ok(message=f"{label} deleted successfully")

    router.add_api_route(
        collection_path,
        list_items,
        methods=["GET"],
        response_model=ApiResponse[list[response_model]],
        name=f"list_{section_name}",
        summary=f"List {section_name} of a curriculum",
    )
    router.add_api_route(
        collection_path,
        create_item,
        methods=["POST"],
        response_model=ApiResponse[response_model],
        status_code=status.HTTP_201_CREATED,
        name=f"create_{section_name}",
        summary=f"Create {label.lower()}",
    )
    router.add_api_route(
        item_path,
        get_item,
        methods=["GET"],
        response_model=ApiResponse[response_model],
        name=f"get_{section_name}",
        summary=f"Get {label.lower()}",
    )
    router.add_api_route(
        item_path,
        update_item,
        methods=["PUT"],
        response_model=ApiResponse[response_model],
        name=f"update_{section_name}",
        summary=f"Update {label.lower()}; only provided fields change",
    )
    router.add_api_route(
        item_path,
        delete_item,
        methods=["DELETE"],
        response_model=ApiResponse[None],
        name=f"delete_{section_name}",
        summary=f"Delete {label.lower()}",
    )


for _name, (_response, _create, _update) in SECTION_SCHEMAS.items():
    _register_section(_name, _response, _create, _update)
