"""
In-memory newsletter and subscriber services.

Both services keep their records in a dict keyed by id. This is placeholder
persistence: data is process-local and lost on restart. Lookups are always
tenant-scoped, so an id belonging to another tenant behaves as missing.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from backend.app.core.errors import ConflictError
from backend.app.plugins.newsletter.schemas import (
    Newsletter,
    NewsletterCreate,
    NewsletterStatus,
    NewsletterUpdate,
    SubscribeRequest,
    Subscriber,
    SubscriberStatus,
    UnsubscribeRequest,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class NewsletterService:
    """Newsletter drafts and their send state."""

    def __init__(self):
        self._newsletters: Dict[str, Newsletter] = {}

    async def create(self, tenant_id: str, dto: NewsletterCreate) -> Newsletter:
        now = _now()
        newsletter = Newsletter(
            id=str(uuid.uuid4()),
            tenant_id=tenant_id,
            title=dto.title,
            content=dto.content,
            status=NewsletterStatus.DRAFT,
            scheduled_at=dto.scheduled_at,
            created_at=now,
            updated_at=now,
        )
        self._newsletters[newsletter.id] = newsletter
        return newsletter

    async def find_all(self, tenant_id: str) -> List[Newsletter]:
        return [n for n in self._newsletters.values() if n.tenant_id == tenant_id]

    async def find_by_id(self, tenant_id: str, newsletter_id: str) -> Optional[Newsletter]:
        newsletter = self._newsletters.get(newsletter_id)
        if newsletter is None or newsletter.tenant_id != tenant_id:
            return None
        return newsletter

    async def update(self, tenant_id: str, newsletter_id: str, dto: NewsletterUpdate) -> Optional[Newsletter]:
        newsletter = await self.find_by_id(tenant_id, newsletter_id)
        if newsletter is None:
            return None

        changes = dto.model_dump(exclude_unset=True)
        changes["updated_at"] = _now()
        updated = newsletter.model_copy(update=changes)
        self._newsletters[newsletter_id] = updated
        return updated

    async def delete(self, tenant_id: str, newsletter_id: str) -> bool:
        if await self.find_by_id(tenant_id, newsletter_id) is None:
            return False
        del self._newsletters[newsletter_id]
        return True

    async def send(self, tenant_id: str, newsletter_id: str) -> Optional[Newsletter]:
        """Mark a newsletter as sent. Delivery itself is not implemented yet."""
        newsletter = await self.find_by_id(tenant_id, newsletter_id)
        if newsletter is None:
            return None
        if newsletter.status == NewsletterStatus.SENT:
            raise ConflictError("Newsletter already sent")
        if newsletter.status == NewsletterStatus.CANCELLED:
            raise ConflictError("Newsletter is cancelled")

        now = _now()
        sent = newsletter.model_copy(update={
            "status": NewsletterStatus.SENT,
            "sent_at": now,
            "updated_at": now,
        })
        self._newsletters[newsletter_id] = sent
        return sent


class SubscriberService:
    """Subscriber list per tenant, unique on email within a tenant."""

    def __init__(self):
        self._subscribers: Dict[str, Subscriber] = {}

    def _find_by_email(self, tenant_id: str, email: str) -> Optional[Subscriber]:
        for subscriber in self._subscribers.values():
            if subscriber.tenant_id == tenant_id and subscriber.email == email:
                return subscriber
        return None

    async def subscribe(self, tenant_id: str, dto: SubscribeRequest) -> Subscriber:
        existing = self._find_by_email(tenant_id, dto.email)
        if existing is not None:
            if existing.status == SubscriberStatus.UNSUBSCRIBED:
                resubscribed = existing.model_copy(update={
                    "status": SubscriberStatus.ACTIVE,
                    "subscribed_at": _now(),
                    "unsubscribed_at": None,
                })
                self._subscribers[existing.id] = resubscribed
                return resubscribed
            return existing

        subscriber = Subscriber(
            id=str(uuid.uuid4()),
            tenant_id=tenant_id,
            email=dto.email,
            name=dto.name,
            status=SubscriberStatus.ACTIVE,
            subscribed_at=_now(),
        )
        self._subscribers[subscriber.id] = subscriber
        return subscriber

    async def unsubscribe(self, tenant_id: str, dto: UnsubscribeRequest) -> Optional[Subscriber]:
        subscriber = self._find_by_email(tenant_id, dto.email)
        if subscriber is None:
            return None

        unsubscribed = subscriber.model_copy(update={
            "status": SubscriberStatus.UNSUBSCRIBED,
            "unsubscribed_at": _now(),
        })
        self._subscribers[subscriber.id] = unsubscribed
        if dto.reason:
            logger.info(f"Subscriber {subscriber.id} left (tenant={tenant_id}): {dto.reason}")
        return unsubscribed

    async def find_all(self, tenant_id: str) -> List[Subscriber]:
        return [s for s in self._subscribers.values() if s.tenant_id == tenant_id]

    async def find_active(self, tenant_id: str) -> List[Subscriber]:
        return [
            s for s in self._subscribers.values()
            if s.tenant_id == tenant_id and s.status == SubscriberStatus.ACTIVE
        ]


_newsletter_service: Optional[NewsletterService] = None
_subscriber_service: Optional[SubscriberService] = None


def get_newsletter_service() -> NewsletterService:
    """Process-wide NewsletterService instance."""
    global _newsletter_service
    if _newsletter_service is None:
        _newsletter_service = NewsletterService()
    return _newsletter_service


def get_subscriber_service() -> SubscriberService:
    """Process-wide SubscriberService instance."""
    global _subscriber_service
    if _subscriber_service is None:
        _subscriber_service = SubscriberService()
    return _subscriber_service
