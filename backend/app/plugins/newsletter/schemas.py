"""Newsletter plugin schemas."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class NewsletterStatus(str, Enum):
    DRAFT = "DRAFT"
    SCHEDULED = "SCHEDULED"
    SENT = "SENT"
    CANCELLED = "CANCELLED"


class SubscriberStatus(str, Enum):
    ACTIVE = "ACTIVE"
    UNSUBSCRIBED = "UNSUBSCRIBED"
    BOUNCED = "BOUNCED"


class Newsletter(BaseModel):
    id: str
    tenant_id: str
    title: str
    content: str
    status: NewsletterStatus = NewsletterStatus.DRAFT
    scheduled_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class Subscriber(BaseModel):
    id: str
    tenant_id: str
    email: str
    name: Optional[str] = None
    status: SubscriberStatus = SubscriberStatus.ACTIVE
    subscribed_at: datetime
    unsubscribed_at: Optional[datetime] = None


class NewsletterCreate(BaseModel):
    title: str = Field(..., min_length=1)
    content: str
    scheduled_at: Optional[datetime] = None


class NewsletterUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = None
    status: Optional[NewsletterStatus] = None
    scheduled_at: Optional[datetime] = None


class SubscribeRequest(BaseModel):
    email: EmailStr
    name: Optional[str] = None


class UnsubscribeRequest(BaseModel):
    email: EmailStr
    reason: Optional[str] = None
