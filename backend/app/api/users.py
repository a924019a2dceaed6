"""Tenant user administration (ADMIN only)."""
from typing import List

from fastapi import APIRouter, Depends, Security
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.database import get_db
from backend.app.core.security import USERS_ADMIN, AuthenticatedUser, get_current_user, get_tenant_id
from backend.app.schemas.common import ApiResponse, MessageResponse
from backend.app.schemas.users import RoleUpdate, UserResponse
from backend.app.services import user_service

router = APIRouter()


@router.get("", response_model=ApiResponse[List[UserResponse]])
async def list_users(
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[USERS_ADMIN]),
    db: AsyncSession = Depends(get_db),
):
    users = await user_service.list_users(db, tenant_id)
    return ApiResponse(data=[UserResponse.model_validate(u) for u in users])


@router.patch("/{user_id}/role", response_model=ApiResponse[UserResponse])
async def change_role(
    user_id: str,
    payload: RoleUpdate,
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[USERS_ADMIN]),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.update_role(db, tenant_id, user_id, payload.role, acting_user_id=current_user.id)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[USERS_ADMIN]),
    db: AsyncSession = Depends(get_db),
):
    """Remove a user; their posts are removed with them."""
    await user_service.delete_user(db, tenant_id, user_id, acting_user_id=current_user.id)
    return MessageResponse(message="User deleted successfully")
