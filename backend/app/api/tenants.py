"""
Tenant API.

Listing and onboarding are public; everything under ``/me`` acts on the
caller's own tenant.
"""
from typing import List

from fastapi import APIRouter, Depends, Security, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.database import get_db
from backend.app.core.security import (
    TENANT_ADMIN,
    AuthenticatedUser,
    create_user_token,
    get_current_user,
    get_tenant_id,
    require_roles,
)
from backend.app.schemas.auth import AuthUser
from backend.app.schemas.common import ApiResponse, MessageResponse
from backend.app.schemas.tenants import (
    TenantCreate,
    TenantOnboardingResult,
    TenantResponse,
    TenantSummary,
    TenantUpdate,
)
from backend.app.schemas.users import Role
from backend.app.services import tenant_service

router = APIRouter()


@router.get("", response_model=ApiResponse[List[TenantSummary]])
async def list_tenants(db: AsyncSession = Depends(get_db)):
    """Public tenant directory, newest first."""
    tenants = await tenant_service.list_tenants(db)
    return ApiResponse(data=[TenantSummary.model_validate(t) for t in tenants])


@router.post("", response_model=ApiResponse[TenantOnboardingResult], status_code=status.HTTP_201_CREATED)
async def create_tenant(payload: TenantCreate, db: AsyncSession = Depends(get_db)):
    """Create a tenant and its first administrator, returning a token for that admin."""
    tenant, admin = await tenant_service.create_tenant(db, payload)
    await db.refresh(tenant)
    return ApiResponse(data=TenantOnboardingResult(
        tenant=TenantResponse.model_validate(tenant),
        token=create_user_token(admin),
        user=AuthUser(
            id=admin.id,
            email=admin.email,
            name=admin.name,
            role=admin.role,
            tenant_id=admin.tenant_id,
        ),
    ))


@router.get("/me", response_model=ApiResponse[TenantResponse])
async def get_my_tenant(
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    tenant = await tenant_service.get_tenant(db, tenant_id)
    return ApiResponse(data=TenantResponse.model_validate(tenant))


@router.patch("/me", response_model=ApiResponse[TenantResponse])
async def update_my_tenant(
    payload: TenantUpdate,
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[TENANT_ADMIN]),
    db: AsyncSession = Depends(get_db),
):
    tenant = await tenant_service.update_tenant(db, tenant_id, payload)
    return ApiResponse(data=TenantResponse.model_validate(tenant))


@router.delete("/me", response_model=MessageResponse)
async def delete_my_tenant(
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Depends(require_roles(Role.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Delete the tenant with all of its users and posts."""
    await tenant_service.delete_tenant(db, tenant_id)
    return MessageResponse(message="Tenant deleted successfully")
