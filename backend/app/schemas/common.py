"""
Response envelopes shared by every router.

Success bodies look like ``{"success": true, "data": ...}``; errors are
rendered by the exception handlers in ``backend.app.api.errors``.
"""
from typing import Generic, List, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    data: List[T]
    pagination: Pagination


class MessageResponse(BaseModel):
    success: bool = True
    message: str
