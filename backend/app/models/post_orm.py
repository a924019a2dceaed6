"""
ORM Model for blog posts.

Slugs are unique per tenant, not globally.
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from backend.app.core.database import Base
from backend.app.schemas.posts import PostStatus


class PostORM(Base):
    __tablename__ = "posts"
    __table_args__ = (
        UniqueConstraint("slug", "tenant_id", name="uq_posts_slug_tenant"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    excerpt = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=PostStatus.DRAFT.value, index=True)  # PostStatus values

    author_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)

    # Set whenever status transitions into PUBLISHED
    published_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    author = relationship("UserORM", back_populates="posts", lazy="selectin")
    tenant = relationship("TenantORM", back_populates="posts", lazy="noload")
