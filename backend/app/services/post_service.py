"""
Post CRUD with per-tenant slug uniqueness.

Every query carries a ``tenant_id`` filter; a post from another tenant is
indistinguishable from a missing one.
"""
import logging
import math
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from backend.app.core.errors import ConflictError, NoBloggError, NotFoundError
from backend.app.core.text import slugify
from backend.app.models.post_orm import PostORM
from backend.app.schemas.common import Pagination
from backend.app.schemas.posts import PostCreate, PostStatus, PostUpdate

logger = logging.getLogger(__name__)


def _post_query(tenant_id: str):
    return (
        select(PostORM)
        .where(PostORM.tenant_id == tenant_id)
        .options(selectinload(PostORM.author))
    )


async def list_posts(
    db: AsyncSession,
    tenant_id: str,
    page: int = 1,
    limit: int = 10,
    status: Optional[PostStatus] = None,
) -> Tuple[List[PostORM], Pagination]:
    """Newest first, one page at a time."""
    query = _post_query(tenant_id)
    count_query = select(func.count()).select_from(PostORM).where(PostORM.tenant_id == tenant_id)
    if status:
        query = query.where(PostORM.status == status.value)
        count_query = count_query.where(PostORM.status == status.value)

    query = query.order_by(PostORM.created_at.desc()).offset((page - 1) * limit).limit(limit)

    posts = list((await db.execute(query)).scalars().all())
    total = (await db.execute(count_query)).scalar_one()

    pagination = Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit) if limit else 0,
    )
    return posts, pagination


async def get_post(db: AsyncSession, tenant_id: str, post_id: str) -> PostORM:
    result = await db.execute(
        _post_query(tenant_id)
        .where(PostORM.id == post_id)
        .execution_options(populate_existing=True)
    )
    post = result.scalar_one_or_none()
    if post is None:
        raise NotFoundError("Post")
    return post


async def get_post_by_slug(db: AsyncSession, tenant_id: str, slug: str) -> PostORM:
    result = await db.execute(_post_query(tenant_id).where(PostORM.slug == slug))
    post = result.scalar_one_or_none()
    if post is None:
        raise NotFoundError("Post")
    return post


async def _slug_taken(db: AsyncSession, tenant_id: str, slug: str) -> bool:
    result = await db.execute(
        select(PostORM.id).where(PostORM.tenant_id == tenant_id, PostORM.slug == slug)
    )
    return result.first() is not None


async def _flush_or_conflict(db: AsyncSession) -> None:
    try:
        await db.flush()
    except IntegrityError:
        # uq_posts_slug_tenant caught a concurrent writer
        raise ConflictError("Slug already exists")


async def create_post(db: AsyncSession, tenant_id: str, author_id: str, payload: PostCreate) -> PostORM:
    slug = payload.slug or slugify(payload.title)
    if not slug:
        raise NoBloggError("Slug cannot be derived from title")
    if await _slug_taken(db, tenant_id, slug):
        raise ConflictError("Slug already exists")

    status = payload.status or PostStatus.DRAFT
    post = PostORM(
        title=payload.title,
        slug=slug,
        content=payload.content,
        excerpt=payload.excerpt,
        status=status.value,
        author_id=author_id,
        tenant_id=tenant_id,
        published_at=datetime.now(timezone.utc) if status == PostStatus.PUBLISHED else None,
    )
    db.add(post)
    await _flush_or_conflict(db)
    logger.info(f"Post created: {post.id} (tenant={tenant_id}, status={status.value})")

    return await get_post(db, tenant_id, post.id)


async def update_post(db: AsyncSession, tenant_id: str, post_id: str, payload: PostUpdate) -> PostORM:
    post = await get_post(db, tenant_id, post_id)
    changes = payload.model_dump(exclude_unset=True)

    new_slug = changes.get("slug")
    if new_slug and new_slug != post.slug and await _slug_taken(db, tenant_id, new_slug):
        raise ConflictError("Slug already exists")

    new_status = changes.pop("status", None)
    if new_status is not None:
        if new_status == PostStatus.PUBLISHED and post.status != PostStatus.PUBLISHED.value:
            post.published_at = datetime.now(timezone.utc)
        post.status = new_status.value

    for field, value in changes.items():
        if value is None and field in ("title", "slug", "content"):
            continue
        setattr(post, field, value)

    await _flush_or_conflict(db)
    logger.info(f"Post updated: {post.id} (tenant={tenant_id}, fields={sorted(payload.model_fields_set)})")

    return await get_post(db, tenant_id, post.id)


async def delete_post(db: AsyncSession, tenant_id: str, post_id: str) -> None:
    post = await get_post(db, tenant_id, post_id)
    await db.delete(post)
    await db.flush()
    logger.info(f"Post deleted: {post_id} (tenant={tenant_id})")
