"""
Tenant lifecycle: listing, onboarding, updates and cascading deletes.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import ConflictError, NoBloggError, NotFoundError
from backend.app.core.text import slugify
from backend.app.models.tenant_orm import TenantORM
from backend.app.models.user_orm import UserORM
from backend.app.schemas.tenants import TenantCreate, TenantUpdate
from backend.app.schemas.users import Role
from backend.app.services.user_service import create_user

logger = logging.getLogger(__name__)


async def list_tenants(db: AsyncSession) -> List[TenantORM]:
    result = await db.execute(select(TenantORM).order_by(TenantORM.created_at.desc()))
    return list(result.scalars().all())


async def get_tenant(db: AsyncSession, tenant_id: str) -> TenantORM:
    tenant = await db.get(TenantORM, tenant_id)
    if tenant is None:
        raise NotFoundError("Tenant")
    return tenant


async def get_tenant_by_slug(db: AsyncSession, slug: str) -> Optional[TenantORM]:
    result = await db.execute(select(TenantORM).where(TenantORM.slug == slug))
    return result.scalar_one_or_none()


async def get_default_tenant(db: AsyncSession) -> Optional[TenantORM]:
    """The oldest tenant; used by login when no tenant slug is given."""
    result = await db.execute(select(TenantORM).order_by(TenantORM.created_at.asc()).limit(1))
    return result.scalar_one_or_none()


async def _ensure_domain_free(db: AsyncSession, domain: str, exclude_id: Optional[str] = None) -> None:
    query = select(TenantORM.id).where(TenantORM.domain == domain)
    if exclude_id:
        query = query.where(TenantORM.id != exclude_id)
    if (await db.execute(query)).first():
        raise ConflictError("Domain already exists")


async def _flush_or_conflict(db: AsyncSession) -> None:
    try:
        await db.flush()
    except IntegrityError:
        # A concurrent writer took the slug or domain after our checks
        raise ConflictError("Tenant slug or domain already exists")


async def create_tenant(db: AsyncSession, payload: TenantCreate) -> Tuple[TenantORM, UserORM]:
    """
    Create a tenant together with its first ADMIN user.

    The slug defaults to the slugified name.
    """
    slug = slugify(payload.slug or payload.name)
    if not slug:
        raise NoBloggError("Slug cannot be derived from name")
    if await get_tenant_by_slug(db, slug):
        raise ConflictError("Slug already exists")
    if payload.domain:
        await _ensure_domain_free(db, payload.domain)

    tenant = TenantORM(name=payload.name, slug=slug, domain=payload.domain)
    db.add(tenant)
    await _flush_or_conflict(db)

    admin = await create_user(
        db,
        tenant_id=tenant.id,
        email=payload.admin_email,
        name=payload.admin_name,
        password=payload.admin_password,
        role=Role.ADMIN,
    )
    logger.info(f"Tenant created: {tenant.slug} ({tenant.id}), admin={admin.id}")
    return tenant, admin


async def update_tenant(db: AsyncSession, tenant_id: str, payload: TenantUpdate) -> TenantORM:
    tenant = await get_tenant(db, tenant_id)
    changes = payload.model_dump(exclude_unset=True)

    if changes.get("domain") and changes["domain"] != tenant.domain:
        await _ensure_domain_free(db, changes["domain"], exclude_id=tenant.id)

    for field, value in changes.items():
        if field == "name" and value is None:
            continue
        setattr(tenant, field, value)

    await _flush_or_conflict(db)
    await db.refresh(tenant)
    return tenant


async def delete_tenant(db: AsyncSession, tenant_id: str) -> None:
    """Hard delete. Users and posts go with it through ON DELETE CASCADE."""
    tenant = await get_tenant(db, tenant_id)
    await db.delete(tenant)
    await db.flush()
    logger.warning(f"Tenant deleted: {tenant.slug} ({tenant_id})")
