"""
Posts API.

Reads need ``posts:read`` (every role), writes ``posts:write`` (EDITOR and
ADMIN) and deletes ``posts:delete`` (ADMIN only). All routes operate on the
caller's tenant.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Security, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import get_settings
from backend.app.core.database import get_db
from backend.app.core.security import (
    POSTS_DELETE,
    POSTS_READ,
    POSTS_WRITE,
    AuthenticatedUser,
    get_current_user,
    get_tenant_id,
)
from backend.app.schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from backend.app.schemas.posts import PostCreate, PostResponse, PostStatus, PostUpdate
from backend.app.services import post_service

router = APIRouter()
settings = get_settings()

# Keeps (page - 1) * limit well inside a signed 64-bit OFFSET
MAX_PAGE = 2**31 - 1


@router.get("", response_model=PaginatedResponse[PostResponse])
async def list_posts(
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(settings.default_page_size, ge=1),
    status: Optional[PostStatus] = Query(None, description="Filter by lifecycle state"),
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[POSTS_READ]),
    db: AsyncSession = Depends(get_db),
):
    limit = min(limit, settings.max_page_size)
    posts, pagination = await post_service.list_posts(db, tenant_id, page=page, limit=limit, status=status)
    return PaginatedResponse(
        data=[PostResponse.model_validate(p) for p in posts],
        pagination=pagination,
    )


@router.get("/slug/{slug}", response_model=ApiResponse[PostResponse])
async def get_post_by_slug(
    slug: str,
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[POSTS_READ]),
    db: AsyncSession = Depends(get_db),
):
    post = await post_service.get_post_by_slug(db, tenant_id, slug)
    return ApiResponse(data=PostResponse.model_validate(post))


@router.get("/{post_id}", response_model=ApiResponse[PostResponse])
async def get_post(
    post_id: str,
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[POSTS_READ]),
    db: AsyncSession = Depends(get_db),
):
    post = await post_service.get_post(db, tenant_id, post_id)
    return ApiResponse(data=PostResponse.model_validate(post))


@router.post("", response_model=ApiResponse[PostResponse], status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[POSTS_WRITE]),
    db: AsyncSession = Depends(get_db),
):
    """Create a post authored by the caller. The slug is derived from the title when omitted."""
    post = await post_service.create_post(db, tenant_id, current_user.id, payload)
    return ApiResponse(data=PostResponse.model_validate(post))


@router.put("/{post_id}", response_model=ApiResponse[PostResponse])
async def update_post(
    post_id: str,
    payload: PostUpdate,
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[POSTS_WRITE]),
    db: AsyncSession = Depends(get_db),
):
    """Partial update; only the fields present in the body change."""
    post = await post_service.update_post(db, tenant_id, post_id, payload)
    return ApiResponse(data=PostResponse.model_validate(post))


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: str,
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[POSTS_DELETE]),
    db: AsyncSession = Depends(get_db),
):
    await post_service.delete_post(db, tenant_id, post_id)
    return MessageResponse(message="Post deleted successfully")
