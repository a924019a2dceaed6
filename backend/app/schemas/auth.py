"""Authentication request/response schemas."""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from backend.app.schemas.users import Role


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    # Falls back to the oldest tenant when omitted
    tenant_slug: Optional[str] = None


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=2)
    tenant_slug: str


class AuthUser(BaseModel):
    id: str
    email: str
    name: str
    role: Role
    tenant_id: str


class AuthResult(BaseModel):
    token: str
    user: AuthUser
