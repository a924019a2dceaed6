import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_newsletter_lifecycle(client: AsyncClient, editor, viewer, auth_headers):
    headers = auth_headers(editor)

    created = await client.post("/api/newsletter", json={"title": "Weekly", "content": "News"}, headers=headers)
    assert created.status_code == 201
    newsletter = created.json()["data"]
    assert newsletter["status"] == "DRAFT"
    assert newsletter["tenant_id"] == editor.tenant_id

    listing = await client.get("/api/newsletter", headers=auth_headers(viewer))
    assert [n["id"] for n in listing.json()["data"]] == [newsletter["id"]]

    updated = await client.put(
        f"/api/newsletter/{newsletter['id']}", json={"title": "Weekly Digest"}, headers=headers
    )
    assert updated.json()["data"]["title"] == "Weekly Digest"

    sent = await client.post(f"/api/newsletter/{newsletter['id']}/send", headers=headers)
    assert sent.status_code == 200
    assert sent.json()["data"]["status"] == "SENT"
    assert sent.json()["data"]["sent_at"] is not None

    resend = await client.post(f"/api/newsletter/{newsletter['id']}/send", headers=headers)
    assert resend.status_code == 409
    assert resend.json() == {"success": False, "error": "Newsletter already sent"}

    deleted = await client.delete(f"/api/newsletter/{newsletter['id']}", headers=headers)
    assert deleted.status_code == 200
    missing = await client.get(f"/api/newsletter/{newsletter['id']}", headers=headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_viewer_cannot_write_newsletters(client: AsyncClient, viewer, auth_headers):
    resp = await client.post(
        "/api/newsletter", json={"title": "Nope", "content": "x"}, headers=auth_headers(viewer)
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_newsletter_management_requires_auth(client: AsyncClient, tenant):
    resp = await client.get("/api/newsletter")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_public_subscribe_and_unsubscribe(client: AsyncClient, tenant, admin, auth_headers):
    tenant_header = {"X-Tenant-ID": tenant.id}

    sub = await client.post(
        "/api/newsletter/subscribers",
        json={"email": "reader@example.com", "name": "Reader"},
        headers=tenant_header,
    )
    assert sub.status_code == 201
    assert sub.json()["data"]["status"] == "ACTIVE"

    active = await client.get("/api/newsletter/subscribers/active", headers=auth_headers(admin))
    assert [s["email"] for s in active.json()["data"]] == ["reader@example.com"]

    unsub = await client.post(
        "/api/newsletter/subscribers/unsubscribe",
        json={"email": "reader@example.com", "reason": "Inbox zero"},
        headers=tenant_header,
    )
    assert unsub.status_code == 200
    assert unsub.json()["data"]["status"] == "UNSUBSCRIBED"

    active = await client.get("/api/newsletter/subscribers/active", headers=auth_headers(admin))
    assert active.json()["data"] == []
    everyone = await client.get("/api/newsletter/subscribers", headers=auth_headers(admin))
    assert len(everyone.json()["data"]) == 1


@pytest.mark.asyncio
async def test_subscribe_requires_known_tenant(client: AsyncClient, tenant):
    body = {"email": "reader@example.com"}

    missing = await client.post("/api/newsletter/subscribers", json=body)
    assert missing.status_code == 400
    assert missing.json()["error"] == "Tenant not identified"

    unknown = await client.post("/api/newsletter/subscribers", json=body, headers={"X-Tenant-ID": "nope"})
    assert unknown.status_code == 404
    assert unknown.json()["error"] == "Tenant not found"


@pytest.mark.asyncio
async def test_unsubscribe_unknown_email(client: AsyncClient, tenant):
    resp = await client.post(
        "/api/newsletter/subscribers/unsubscribe",
        json={"email": "ghost@example.com"},
        headers={"X-Tenant-ID": tenant.id},
    )
    assert resp.status_code == 404
    assert resp.json()["error"] == "Subscriber not found"
