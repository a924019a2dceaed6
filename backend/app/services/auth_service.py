import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import AuthenticationError, NotFoundError
from backend.app.core.security import verify_password
from backend.app.models.tenant_orm import TenantORM
from backend.app.models.user_orm import UserORM
from backend.app.schemas.users import Role
from backend.app.services import tenant_service, user_service

logger = logging.getLogger(__name__)


async def _resolve_tenant(db: AsyncSession, tenant_slug: Optional[str]) -> TenantORM:
    if tenant_slug:
        tenant = await tenant_service.get_tenant_by_slug(db, tenant_slug)
    else:
        tenant = await tenant_service.get_default_tenant(db)
    if tenant is None:
        raise NotFoundError("Tenant")
    return tenant


async def authenticate_user(
    db: AsyncSession, email: str, password: str, tenant_slug: Optional[str] = None
) -> UserORM:
    """
    Check credentials within one tenant. Without a slug the oldest tenant is used.

    Unknown users and wrong passwords get the same error so that login does
    not reveal which emails exist.
    """
    tenant = await _resolve_tenant(db, tenant_slug)
    user = await user_service.get_user_by_email(db, tenant.id, email)
    if user is None or not verify_password(password, user.hashed_password):
        logger.info(f"Rejected login for tenant={tenant.slug}")
        raise AuthenticationError("Invalid credentials")
    return user


async def register_user(
    db: AsyncSession, email: str, password: str, name: str, tenant_slug: str
) -> UserORM:
    """Self-service sign-up. New accounts always start as VIEWER."""
    tenant = await _resolve_tenant(db, tenant_slug)
    return await user_service.create_user(db, tenant.id, email, name, password, Role.VIEWER)
