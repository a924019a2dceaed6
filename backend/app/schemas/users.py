"""User schemas and the fixed role set."""
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    """Tenant roles, from most to least privileged."""
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: Role
    tenant_id: str
    created_at: datetime


class RoleUpdate(BaseModel):
    role: Role
