"""Curriculum routes for the API."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, HTTPException, Path, Request, status

from cvfast.api.dependencies import ClientIp, CurrentUserId, OptionalUserId, ShareBaseUrl
from cvfast.api.routes.short_links import CURRICULUM_NOT_FOUND, resolve_for_request
from cvfast.api.schemas.common import ApiResponse, ok
from cvfast.api.schemas.curriculums import (
    CurriculumCreateRequest,
    CurriculumDetailResponse,
    CurriculumResponse,
    CurriculumUpdateRequest,
)
from cvfast.services.curriculum import (
    create_curriculum,
    delete_curriculum,
    get_curriculum,
    get_curriculum_detail,
    list_curriculums,
    update_curriculum,
)

router = APIRouter(prefix="/curriculums", tags=["curriculums"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CURRICULUM_NOT_FOUND)


# --- /shortlink/{hash} MUST come before /{curriculum_id} ---


@router.get("/shortlink/{hash_value}", response_model=ApiResponse[CurriculumDetailResponse])
def get_curriculum_by_short_link(
    hash_value: Annotated[str, Path(description="Short link hash")],
    request: Request,
    background_tasks: BackgroundTasks,
    viewer_id: OptionalUserId,
    client_ip: ClientIp,
    base_url: ShareBaseUrl,
) -> ApiResponse[CurriculumDetailResponse]:
    """Resolve a short link hash; a Hidden curriculum resolves for its owner only."""
    return resolve_for_request(
        hash_value,
        viewer_id=viewer_id,
        request=request,
        client_ip=client_ip,
        base_url=base_url,
        background_tasks=background_tasks,
    )


@router.get("", response_model=ApiResponse[list[CurriculumResponse]])
def list_curriculums_endpoint(
    current_user_id: CurrentUserId,
) -> ApiResponse[list[CurriculumResponse]]:
    """List the caller's curricula, most recently updated first."""
    return ok([CurriculumResponse(**c) for c in list_curriculums(current_user_id)])


@router.post(
    "",
    response_model=ApiResponse[CurriculumDetailResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_curriculum_endpoint(
    data: CurriculumCreateRequest,
    current_user_id: CurrentUserId,
    base_url: ShareBaseUrl,
) -> ApiResponse[CurriculumDetailResponse]:
    """Create a curriculum; its first short link is created with it."""
    result = create_curriculum(current_user_id, data.model_dump())
    if not result:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to create curriculum",
        )

    return ok(
        CurriculumDetailResponse.from_detail(result, base_url),
        "Curriculum created successfully",
    )


@router.get("/{curriculum_id}", response_model=ApiResponse[CurriculumResponse])
def get_curriculum_endpoint(
    curriculum_id: Annotated[uuid.UUID, Path(description="Curriculum ID")],
    current_user_id: CurrentUserId,
) -> ApiResponse[CurriculumResponse]:
    """Get one of the caller's curricula."""
    result = get_curriculum(current_user_id, curriculum_id)
    if not result:
        raise _not_found()

    return ok(CurriculumResponse(**result))


@router.get("/{curriculum_id}/complete", response_model=ApiResponse[CurriculumDetailResponse])
def get_complete_curriculum_endpoint(
    curriculum_id: Annotated[uuid.UUID, Path(description="Curriculum ID")],
    current_user_id: CurrentUserId,
    base_url: ShareBaseUrl,
) -> ApiResponse[CurriculumDetailResponse]:
    """Get a curriculum with every section and all its short links."""
    result = get_curriculum_detail(current_user_id, curriculum_id)
    if not result:
        raise _not_found()

    return ok(CurriculumDetailResponse.from_detail(result, base_url))


@router.put("/{curriculum_id}", response_model=ApiResponse[CurriculumResponse])
def update_curriculum_endpoint(
    curriculum_id: Annotated[uuid.UUID, Path(description="Curriculum ID")],
    data: CurriculumUpdateRequest,
    current_user_id: CurrentUserId,
) -> ApiResponse[CurriculumResponse]:
    """Update a curriculum. Only provided fields are updated."""
    result = update_curriculum(current_user_id, curriculum_id, data.model_dump(exclude_unset=True))
    if not result:
        raise _not_found()

    return ok(CurriculumResponse(**result), "Curriculum updated successfully")


@router.delete("/{curriculum_id}", response_model=ApiResponse[None])
def delete_curriculum_endpoint(
    curriculum_id: Annotated[uuid.UUID, Path(description="Curriculum ID")],
    current_user_id: CurrentUserId,
) -> ApiResponse[None]:
    """Delete a curriculum with its sections, short links and access logs."""
    if not delete_curriculum(current_user_id, curriculum_id):
        raise _not_found()

    return ok(message="Curriculum deleted successfully")
