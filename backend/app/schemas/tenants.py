"""Tenant schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from backend.app.schemas.auth import AuthUser


def _normalize_domain(value: Optional[str]) -> Optional[str]:
    """Domains are optional; whitespace-only input means no domain."""
    if value is None:
        return None
    value = value.strip()
    return value or None


class TenantSummary(BaseModel):
    """Public listing entry."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    domain: Optional[str] = None
    created_at: datetime


class TenantResponse(TenantSummary):
    updated_at: datetime


class TenantCreate(BaseModel):
    """Onboarding request: a new tenant plus its first administrator."""
    name: str = Field(..., min_length=2, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, description="Derived from name when omitted")
    domain: Optional[str] = Field(None, max_length=255)
    admin_email: EmailStr
    admin_name: str = Field(..., min_length=2)
    admin_password: str = Field(..., min_length=6)

    @field_validator("domain")
    @classmethod
    def blank_domain_is_none(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_domain(v)


class TenantUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    domain: Optional[str] = Field(None, max_length=255)

    @field_validator("domain")
    @classmethod
    def blank_domain_is_none(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_domain(v)


class TenantOnboardingResult(BaseModel):
    tenant: TenantResponse
    token: str
    user: AuthUser
