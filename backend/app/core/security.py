"""
Security and Authentication for the noblogg API.

Implements bearer JWT authentication, bcrypt password hashing and
role-based access control. Roles map to scopes; routes declare the scopes
they need with ``Security(get_current_user, scopes=[...])``.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import bcrypt
from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer, SecurityScopes
from jose import JWTError, jwt
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import get_settings
from backend.app.core.database import get_db
from backend.app.core.logging import tenant_id_ctx
from backend.app.models.user_orm import UserORM
from backend.app.schemas.users import Role

logger = logging.getLogger(__name__)
settings = get_settings()

# Scopes
POSTS_READ = "posts:read"
POSTS_WRITE = "posts:write"
POSTS_DELETE = "posts:delete"
TENANT_ADMIN = "tenant:admin"
USERS_ADMIN = "users:admin"
NEWSLETTER_READ = "newsletter:read"
NEWSLETTER_WRITE = "newsletter:write"

_VIEWER_SCOPES = [POSTS_READ, NEWSLETTER_READ]
_EDITOR_SCOPES = _VIEWER_SCOPES + [POSTS_WRITE, NEWSLETTER_WRITE]

ROLE_SCOPES: Dict[Role, List[str]] = {
    Role.ADMIN: _EDITOR_SCOPES + [POSTS_DELETE, TENANT_ADMIN, USERS_ADMIN],
    Role.EDITOR: _EDITOR_SCOPES,
    Role.VIEWER: _VIEWER_SCOPES,
}

bearer_scheme = HTTPBearer(auto_error=False, description="JWT issued by /api/auth/login")


def is_admin(role: Role | str) -> bool:
    return Role(role) == Role.ADMIN


def can_edit(role: Role | str) -> bool:
    return Role(role) in (Role.ADMIN, Role.EDITOR)


def hash_password(plain: str) -> str:
    """Hash a password with bcrypt using the configured work factor."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    hashed = bcrypt.hashpw(plain.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError as e:
        logger.error(f"Password verification error: {e}")
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Generate a signed JWT token.
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"iat": now, "exp": now + expires_delta})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def create_user_token(user: UserORM) -> str:
    """Token for a persisted user. Role and tenant are re-read from the DB on every request."""
    return create_access_token(
        data={
            "sub": user.id,
            "email": user.email,
            "role": Role(user.role).value,
            "tenant_id": user.tenant_id,
        }
    )


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify a token. Raises JWTError on bad signature or expiry."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])


class AuthenticatedUser(BaseModel):
    id: str
    email: str
    name: str
    role: Role
    tenant_id: Optional[str] = None
    scopes: List[str] = []


async def get_current_user(
    security_scopes: SecurityScopes,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> AuthenticatedUser:
    """
    Validate the bearer token, load the user it names and check the required
    scopes against the user's current role.
    """
    if security_scopes.scopes:
        authenticate_value = f'Bearer scope="{security_scopes.scope_str}"'
    else:
        authenticate_value = "Bearer"

    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": authenticate_value},
        )

    invalid_token = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid token",
        headers={"WWW-Authenticate": authenticate_value},
    )

    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        raise invalid_token

    user_id = payload.get("sub")
    if not user_id:
        raise invalid_token

    user = await db.get(UserORM, user_id)
    if user is None:
        raise invalid_token

    role = Role(user.role)
    scopes = ROLE_SCOPES.get(role, [])

    for scope in security_scopes.scopes:
        if scope not in scopes:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Not enough permissions. Required scope: {scope}",
                headers={"WWW-Authenticate": authenticate_value},
            )

    return AuthenticatedUser(
        id=user.id,
        email=user.email,
        name=user.name,
        role=role,
        tenant_id=user.tenant_id,
        scopes=scopes,
    )


def require_roles(*roles: Role):
    """Dependency factory that only lets the listed roles through."""

    async def role_checker(current_user: AuthenticatedUser = Security(get_current_user)) -> AuthenticatedUser:
        if current_user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return current_user

    return role_checker


async def get_tenant_id(current_user: AuthenticatedUser = Security(get_current_user)) -> str:
    """
    Tenant isolation gate. Every tenant-owned query filters on the value returned here.
    """
    if not current_user.tenant_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tenant not identified")
    tenant_id_ctx.set(current_user.tenant_id)
    return current_user.tenant_id
