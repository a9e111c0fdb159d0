"""Registration and login routes."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from cvfast.api.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from cvfast.api.schemas.common import ApiResponse, ok
from cvfast.services.auth import authenticate_user, create_access_token, register_user

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user: dict) -> AuthResponse:
    token, expiration = create_access_token(user)
    return AuthResponse(token=token, expiration=expiration, user=UserResponse(**user))


@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
)
def register(data: RegisterRequest) -> ApiResponse[AuthResponse]:
    """Create an account and return a bearer token for it."""
    user, error = register_user(data.email, data.name, data.password)
    if user is None:
        code = (
            status.HTTP_409_CONFLICT
            if error == "Email already in use."
            else status.HTTP_400_BAD_REQUEST
        )
        raise HTTPException(status_code=code, detail=error or "Registration failed")

    return ok(_auth_response(user), "User registered successfully")


@router.post("/login", response_model=ApiResponse[AuthResponse])
def login(data: LoginRequest) -> ApiResponse[AuthResponse]:
    """Exchange e-mail and password for a bearer token."""
    user = authenticate_user(data.email, data.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return ok(_auth_response(user), "Login successful")
