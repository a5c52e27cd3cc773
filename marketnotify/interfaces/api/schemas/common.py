"""Response envelope shared by every endpoint."""

from __future__ import annotations

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """``{status, data?, message?}`` wrapper expected by the mobile clients."""

    status: Literal["success", "error"] = "success"
    data: T | None = None
    message: str | None = None


def success(data: T | None = None, message: str | None = None) -> ApiResponse[T]:
    return ApiResponse(status="success", data=data, message=message)


__all__ = ["ApiResponse", "success"]
