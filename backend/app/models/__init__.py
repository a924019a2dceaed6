"""Models package."""

from backend.app.models.tenant_orm import TenantORM
from backend.app.models.user_orm import UserORM
from backend.app.models.post_orm import PostORM

__all__ = [
    "TenantORM",
    "UserORM",
    "PostORM",
]
