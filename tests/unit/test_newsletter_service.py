import pytest

from backend.app.core.errors import ConflictError
from backend.app.plugins.newsletter.schemas import (
    NewsletterCreate,
    NewsletterStatus,
    NewsletterUpdate,
    SubscribeRequest,
    SubscriberStatus,
    UnsubscribeRequest,
)
from backend.app.plugins.newsletter.service import NewsletterService, SubscriberService


@pytest.fixture
def newsletters():
    return NewsletterService()


@pytest.fixture
def subscribers():
    return SubscriberService()


@pytest.mark.asyncio
async def test_create_starts_as_draft(newsletters):
    created = await newsletters.create("t1", NewsletterCreate(title="Weekly", content="Body"))
    assert created.status == NewsletterStatus.DRAFT
    assert created.tenant_id == "t1"
    assert created.sent_at is None
    assert await newsletters.find_all("t1") == [created]


@pytest.mark.asyncio
async def test_lookups_are_tenant_scoped(newsletters):
    created = await newsletters.create("t1", NewsletterCreate(title="Weekly", content="Body"))

    assert await newsletters.find_by_id("t2", created.id) is None
    assert await newsletters.find_all("t2") == []
    assert await newsletters.update("t2", created.id, NewsletterUpdate(title="Hijack")) is None
    assert await newsletters.delete("t2", created.id) is False
    assert (await newsletters.find_by_id("t1", created.id)).title == "Weekly"


@pytest.mark.asyncio
async def test_update_changes_only_given_fields(newsletters):
    created = await newsletters.create("t1", NewsletterCreate(title="Weekly", content="Body"))
    updated = await newsletters.update("t1", created.id, NewsletterUpdate(title="Monthly"))

    assert updated.title == "Monthly"
    assert updated.content == "Body"
    assert updated.updated_at >= created.updated_at


@pytest.mark.asyncio
async def test_send_marks_sent_once(newsletters):
    created = await newsletters.create("t1", NewsletterCreate(title="Weekly", content="Body"))
    sent = await newsletters.send("t1", created.id)

    assert sent.status == NewsletterStatus.SENT
    assert sent.sent_at is not None
    with pytest.raises(ConflictError):
        await newsletters.send("t1", created.id)


@pytest.mark.asyncio
async def test_cancelled_newsletter_cannot_be_sent(newsletters):
    created = await newsletters.create("t1", NewsletterCreate(title="Weekly", content="Body"))
    await newsletters.update("t1", created.id, NewsletterUpdate(status=NewsletterStatus.CANCELLED))
    with pytest.raises(ConflictError):
        await newsletters.send("t1", created.id)


@pytest.mark.asyncio
async def test_delete_removes_newsletter(newsletters):
    created = await newsletters.create("t1", NewsletterCreate(title="Weekly", content="Body"))
    assert await newsletters.delete("t1", created.id) is True
    assert await newsletters.find_by_id("t1", created.id) is None


@pytest.mark.asyncio
async def test_subscribe_is_idempotent_per_tenant(subscribers):
    first = await subscribers.subscribe("t1", SubscribeRequest(email="reader@example.com"))
    again = await subscribers.subscribe("t1", SubscribeRequest(email="reader@example.com"))
    other = await subscribers.subscribe("t2", SubscribeRequest(email="reader@example.com"))

    assert again.id == first.id
    assert other.id != first.id
    assert len(await subscribers.find_all("t1")) == 1


@pytest.mark.asyncio
async def test_unsubscribe_and_resubscribe(subscribers):
    first = await subscribers.subscribe("t1", SubscribeRequest(email="reader@example.com", name="Reader"))
    left = await subscribers.unsubscribe("t1", UnsubscribeRequest(email="reader@example.com", reason="too many"))

    assert left.status == SubscriberStatus.UNSUBSCRIBED
    assert left.unsubscribed_at is not None
    assert await subscribers.find_active("t1") == []

    back = await subscribers.subscribe("t1", SubscribeRequest(email="reader@example.com"))
    assert back.id == first.id
    assert back.status == SubscriberStatus.ACTIVE
    assert back.unsubscribed_at is None


@pytest.mark.asyncio
async def test_unsubscribe_unknown_email(subscribers):
    assert await subscribers.unsubscribe("t1", UnsubscribeRequest(email="ghost@example.com")) is None
