"""
Authentication router.
Exchanges tenant-scoped credentials for JWTs and handles self sign-up.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.database import get_db
from backend.app.core.security import create_user_token
from backend.app.models.user_orm import UserORM
from backend.app.schemas.auth import AuthResult, AuthUser, LoginRequest, RegisterRequest
from backend.app.schemas.common import ApiResponse
from backend.app.services import auth_service

router = APIRouter()


def _auth_result(user: UserORM) -> AuthResult:
    return AuthResult(
        token=create_user_token(user),
        user=AuthUser(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            tenant_id=user.tenant_id,
        ),
    )


@router.post("/login", response_model=ApiResponse[AuthResult])
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Log in to a tenant. ``tenant_slug`` selects the tenant; without it the
    oldest tenant is used.
    """
    user = await auth_service.authenticate_user(db, payload.email, payload.password, payload.tenant_slug)
    return ApiResponse(data=_auth_result(user))


@router.post("/register", response_model=ApiResponse[AuthResult], status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create a VIEWER account in an existing tenant and log it in."""
    user = await auth_service.register_user(
        db, payload.email, payload.password, payload.name, payload.tenant_slug
    )
    return ApiResponse(data=_auth_result(user))
