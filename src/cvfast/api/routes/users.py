"""User routes for the API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from cvfast.api.dependencies import CurrentUserId
from cvfast.api.schemas.auth import UserResponse, UserUpdateRequest
from cvfast.api.schemas.common import ApiResponse, ok
from cvfast.services.auth import delete_user, get_user, update_user

router = APIRouter(prefix="/users", tags=["users"])

USER_NOT_FOUND = "User not found"


def _not_found() -> HTTPException:
    # Token outlived its account
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)


@router.get("/me", response_model=ApiResponse[UserResponse])
def get_me(current_user_id: CurrentUserId) -> ApiResponse[UserResponse]:
    """Return the authenticated user."""
    user = get_user(current_user_id)
    if user is None:
        raise _not_found()
    return ok(UserResponse(**user))


@router.put("/me", response_model=ApiResponse[UserResponse])
def update_me(
    data: UserUpdateRequest, current_user_id: CurrentUserId
) -> ApiResponse[UserResponse]:
    """Change the display name and/or password of the authenticated user."""
    user, error = update_user(
        current_user_id,
        name=data.name,
        current_password=data.current_password,
        new_password=data.new_password,
    )
    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)
    if user is None:
        raise _not_found()
    return ok(UserResponse(**user), "User updated successfully")


@router.delete("/me", response_model=ApiResponse[None])
def delete_me(current_user_id: CurrentUserId) -> ApiResponse[None]:
    """Delete the authenticated user with all their curricula and short links."""
    if not delete_user(current_user_id):
        raise _not_found()
    return ok(message="User deleted successfully")
