import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from backend.app.core.database import Base

class TenantORM(Base):
    """
    ORM Model for Multi-tenant isolation.

    Users and posts are removed by the database (ON DELETE CASCADE) when a
    tenant is deleted, so the collections are never loaded for deletes.
    """
    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    domain = Column(String(255), unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    users = relationship("UserORM", back_populates="tenant", passive_deletes=True, lazy="noload")
    posts = relationship("PostORM", back_populates="tenant", passive_deletes=True, lazy="noload")

    def __repr__(self):
        return f"<Tenant {self.slug}>"
