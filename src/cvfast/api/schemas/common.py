"""Shared Pydantic schemas for API responses."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

DEFAULT_SUCCESS_MESSAGE = "Operation completed successfully"


class ApiResponse(BaseModel, Generic[T]):
    """Envelope wrapping every ``/api`` response body."""

    success: bool = Field(description="Whether the operation succeeded")
    message: str = Field(description="Human-readable outcome")
    data: T | None = Field(None, description="Payload, null on failure")
    errors: list[str] | None = Field(None, description="Error details, if any")


def ok(data: T | None = None, message: str = DEFAULT_SUCCESS_MESSAGE) -> ApiResponse[T]:
    """Build a success envelope."""
    return ApiResponse(success=True, message=message, data=data)


def fail(message: str, errors: list[str] | None = None) -> ApiResponse[None]:
    """Build a failure envelope."""
    return ApiResponse(success=False, message=message, data=None, errors=errors)
