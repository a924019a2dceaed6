"""Post schemas and lifecycle states."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PostStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class PostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255, description="Derived from title when omitted")
    content: str
    excerpt: Optional[str] = None
    status: Optional[PostStatus] = None


class PostUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = None
    excerpt: Optional[str] = None
    status: Optional[PostStatus] = None


class AuthorSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    status: PostStatus
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    author_id: str
    tenant_id: str
    author: Optional[AuthorSummary] = None
