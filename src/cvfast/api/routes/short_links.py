"""Short link routes for the API.

``/shortlinks/access/{hash}`` is the anonymous entry point behind every
share URL; the remaining routes let an owner manage their links.
"""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, HTTPException, Path, Request, status

from cvfast.api.dependencies import ClientIp, CurrentUserId, OptionalUserId, ShareBaseUrl
from cvfast.api.schemas.common import ApiResponse, ok
from cvfast.api.schemas.curriculums import CurriculumDetailResponse
from cvfast.api.schemas.short_links import (
    AccessLogResponse,
    ShortLinkCreateRequest,
    ShortLinkResponse,
)
from cvfast.data.db import get_session
from cvfast.services.access_log import list_access_logs, record_access_safely
from cvfast.services.curriculum import get_owned_curriculum, short_link_to_dict
from cvfast.services.resolution import resolve_hash
from cvfast.services.short_links import (
    create_short_link,
    get_owned_short_link,
    list_by_curriculum,
    revoke_short_link,
)

router = APIRouter(prefix="/shortlinks", tags=["shortlinks"])

LINK_NOT_FOUND = "Short link not found or revoked"
CURRICULUM_NOT_FOUND = "Curriculum not found"


def resolve_for_request(
    hash_value: str,
    *,
    viewer_id: uuid.UUID | None,
    request: Request,
    client_ip: str,
    base_url: str,
    background_tasks: BackgroundTasks,
) -> ApiResponse[CurriculumDetailResponse]:
    """Resolve ``hash_value`` and schedule the access record.

    Unknown, revoked and hidden links raise the same 404 so a caller cannot
    tell them apart. The access is recorded only after a successful
    resolution, in a background task that never fails the response.

    Raises:
        HTTPException: 404 with ``LINK_NOT_FOUND``.
    """
    resolution = resolve_hash(hash_value, viewer_id)
    if resolution is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=LINK_NOT_FOUND)

    background_tasks.add_task(
        record_access_safely,
        resolution.short_link_id,
        client_ip,
        request.headers.get("user-agent"),
    )
    return ok(CurriculumDetailResponse.from_detail(resolution.curriculum, base_url))


def _verify_curriculum_owner(current_user_id: uuid.UUID, curriculum_id: uuid.UUID) -> None:
    """Raise 404 unless the curriculum exists and belongs to the caller."""
    with get_session() as session:
        if get_owned_curriculum(session, current_user_id, curriculum_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=CURRICULUM_NOT_FOUND
            )


def _owned_link_or_404(short_link_id: uuid.UUID, current_user_id: uuid.UUID):
    short_link = get_owned_short_link(short_link_id, current_user_id)
    if short_link is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Short link not found")
    return short_link


# --- /access and /curriculum MUST come before /{short_link_id} ---


@router.get("/access/{hash_value}", response_model=ApiResponse[CurriculumDetailResponse])
def access_short_link(
    hash_value: Annotated[str, Path(description="Short link hash")],
    request: Request,
    background_tasks: BackgroundTasks,
    viewer_id: OptionalUserId,
    client_ip: ClientIp,
    base_url: ShareBaseUrl,
) -> ApiResponse[CurriculumDetailResponse]:
    """Resolve a share URL to the full curriculum."""
    return resolve_for_request(
        hash_value,
        viewer_id=viewer_id,
        request=request,
        client_ip=client_ip,
        base_url=base_url,
        background_tasks=background_tasks,
    )


@router.get(
    "/curriculum/{curriculum_id}",
    response_model=ApiResponse[list[ShortLinkResponse]],
)
def list_curriculum_short_links(
    curriculum_id: Annotated[uuid.UUID, Path(description="Curriculum ID")],
    current_user_id: CurrentUserId,
    base_url: ShareBaseUrl,
) -> ApiResponse[list[ShortLinkResponse]]:
    """List every short link of a curriculum, revoked ones included."""
    _verify_curriculum_owner(current_user_id, curriculum_id)

    links = list_by_curriculum(curriculum_id)
    return ok([ShortLinkResponse.from_link(short_link_to_dict(link), base_url) for link in links])


@router.post(
    "",
    response_model=ApiResponse[ShortLinkResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_short_link_endpoint(
    data: ShortLinkCreateRequest,
    current_user_id: CurrentUserId,
    base_url: ShareBaseUrl,
) -> ApiResponse[ShortLinkResponse]:
    """Create an additional short link for one of the caller's curricula."""
    _verify_curriculum_owner(current_user_id, data.curriculum_id)

    short_link = create_short_link(data.curriculum_id)
    return ok(
        ShortLinkResponse.from_link(short_link_to_dict(short_link), base_url),
        "Short link created successfully",
    )


@router.get("/{short_link_id}", response_model=ApiResponse[ShortLinkResponse])
def get_short_link_endpoint(
    short_link_id: Annotated[uuid.UUID, Path(description="Short link ID")],
    current_user_id: CurrentUserId,
    base_url: ShareBaseUrl,
) -> ApiResponse[ShortLinkResponse]:
    """Get one of the caller's short links."""
    short_link = _owned_link_or_404(short_link_id, current_user_id)
    return ok(ShortLinkResponse.from_link(short_link_to_dict(short_link), base_url))


@router.put("/{short_link_id}/revoke", response_model=ApiResponse[ShortLinkResponse])
def revoke_short_link_endpoint(
    short_link_id: Annotated[uuid.UUID, Path(description="Short link ID")],
    current_user_id: CurrentUserId,
    base_url: ShareBaseUrl,
) -> ApiResponse[ShortLinkResponse]:
    """Revoke a short link. Revoking twice is accepted and changes nothing."""
    _owned_link_or_404(short_link_id, current_user_id)

    if not revoke_short_link(short_link_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Short link not found")

    short_link = _owned_link_or_404(short_link_id, current_user_id)
    return ok(
        ShortLinkResponse.from_link(short_link_to_dict(short_link), base_url),
        "Short link revoked successfully",
    )


@router.get("/{short_link_id}/logs", response_model=ApiResponse[list[AccessLogResponse]])
def list_short_link_logs(
    short_link_id: Annotated[uuid.UUID, Path(description="Short link ID")],
    current_user_id: CurrentUserId,
) -> ApiResponse[list[AccessLogResponse]]:
    """List the recorded accesses of one of the caller's short links."""
    _owned_link_or_404(short_link_id, current_user_id)

    return ok([AccessLogResponse.model_validate(log) for log in list_access_logs(short_link_id)])
