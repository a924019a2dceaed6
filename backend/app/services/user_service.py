"""
Tenant user administration. Every lookup is scoped to one tenant.
"""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.errors import ConflictError, NotFoundError
from backend.app.core.security import hash_password
from backend.app.models.user_orm import UserORM
from backend.app.schemas.users import Role

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, tenant_id: str, email: str) -> Optional[UserORM]:
    result = await db.execute(
        select(UserORM).where(UserORM.email == email, UserORM.tenant_id == tenant_id)
    )
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    tenant_id: str,
    email: str,
    name: str,
    password: str,
    role: Role = Role.VIEWER,
) -> UserORM:
    if await get_user_by_email(db, tenant_id, email):
        raise ConflictError("User already exists")

    user = UserORM(
        email=email,
        name=name,
        hashed_password=hash_password(password),
        role=role.value,
        tenant_id=tenant_id,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        # Concurrent registration won the unique (email, tenant_id) race
        raise ConflictError("User already exists")
    logger.info(f"User created: {user.id} (tenant={tenant_id}, role={role.value})")
    return user


async def list_users(db: AsyncSession, tenant_id: str) -> List[UserORM]:
    result = await db.execute(
        select(UserORM).where(UserORM.tenant_id == tenant_id).order_by(UserORM.created_at.asc())
    )
    return list(result.scalars().all())


async def get_user(db: AsyncSession, tenant_id: str, user_id: str) -> UserORM:
    result = await db.execute(
        select(UserORM).where(UserORM.id == user_id, UserORM.tenant_id == tenant_id)
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User")
    return user


async def update_role(db: AsyncSession, tenant_id: str, user_id: str, role: Role, acting_user_id: str) -> UserORM:
    user = await get_user(db, tenant_id, user_id)
    if user.id == acting_user_id and role != Role.ADMIN:
        raise ConflictError("Admins cannot demote themselves")

    previous = user.role
    user.role = role.value
    await db.flush()
    logger.info(f"Role changed for user {user.id}: {previous} -> {role.value}")
    return user


async def delete_user(db: AsyncSession, tenant_id: str, user_id: str, acting_user_id: str) -> None:
    """Hard delete; the user's posts are removed by ON DELETE CASCADE."""
    if user_id == acting_user_id:
        raise ConflictError("Users cannot delete themselves")
    user = await get_user(db, tenant_id, user_id)
    await db.delete(user)
    await db.flush()
    logger.info(f"User deleted: {user_id} (tenant={tenant_id})")
