import pytest
from httpx import AsyncClient

from backend.app.schemas.posts import PostStatus
from backend.app.schemas.users import Role


@pytest.mark.asyncio
async def test_editor_creates_post_with_derived_slug(client: AsyncClient, editor, auth_headers):
    resp = await client.post(
        "/api/posts",
        json={"title": "Hello World!", "content": "First post", "excerpt": "Intro"},
        headers=auth_headers(editor),
    )
    assert resp.status_code == 201
    post = resp.json()["data"]
    assert post["slug"] == "hello-world"
    assert post["status"] == "DRAFT"
    assert post["published_at"] is None
    assert post["author_id"] == editor.id
    assert post["tenant_id"] == editor.tenant_id
    assert post["author"] == {"id": editor.id, "name": editor.name, "email": editor.email}


@pytest.mark.asyncio
async def test_create_published_sets_published_at(client: AsyncClient, admin, auth_headers):
    resp = await client.post(
        "/api/posts",
        json={"title": "Launch", "content": "We are live", "status": "PUBLISHED"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 201
    assert resp.json()["data"]["published_at"] is not None


@pytest.mark.asyncio
async def test_untitled_slug_is_rejected(client: AsyncClient, editor, auth_headers):
    resp = await client.post("/api/posts", json={"title": "???", "content": "x"}, headers=auth_headers(editor))
    assert resp.status_code == 400
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_duplicate_slug_in_tenant_conflicts(client: AsyncClient, editor, make_post, auth_headers):
    await make_post(editor, slug="taken")
    resp = await client.post(
        "/api/posts",
        json={"title": "Another", "slug": "taken", "content": "x"},
        headers=auth_headers(editor),
    )
    assert resp.status_code == 409
    assert resp.json() == {"success": False, "error": "Slug already exists"}


@pytest.mark.asyncio
async def test_same_slug_allowed_across_tenants(
    client: AsyncClient, editor, make_tenant, make_user, make_post, auth_headers
):
    await make_post(editor, slug="shared")
    other_editor = await make_user(await make_tenant("other-org"), Role.EDITOR)
    resp = await client.post(
        "/api/posts",
        json={"title": "Shared", "slug": "shared", "content": "x"},
        headers=auth_headers(other_editor),
    )
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_viewer_reads_but_cannot_write(client: AsyncClient, viewer, editor, make_post, auth_headers):
    post = await make_post(editor)
    headers = auth_headers(viewer)

    assert (await client.get(f"/api/posts/{post.id}", headers=headers)).status_code == 200

    create = await client.post("/api/posts", json={"title": "Nope", "content": "x"}, headers=headers)
    assert create.status_code == 403
    assert create.json()["error"] == "Not enough permissions. Required scope: posts:write"

    update = await client.put(f"/api/posts/{post.id}", json={"title": "Nope"}, headers=headers)
    assert update.status_code == 403


@pytest.mark.asyncio
async def test_only_admin_deletes(client: AsyncClient, admin, editor, make_post, auth_headers):
    post = await make_post(editor)

    denied = await client.delete(f"/api/posts/{post.id}", headers=auth_headers(editor))
    assert denied.status_code == 403

    resp = await client.delete(f"/api/posts/{post.id}", headers=auth_headers(admin))
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Post deleted successfully"}

    gone = await client.get(f"/api/posts/{post.id}", headers=auth_headers(admin))
    assert gone.status_code == 404
    assert gone.json()["error"] == "Post not found"


@pytest.mark.asyncio
async def test_get_by_slug(client: AsyncClient, viewer, editor, make_post, auth_headers):
    post = await make_post(editor, title="By Slug", slug="by-slug")
    resp = await client.get("/api/posts/slug/by-slug", headers=auth_headers(viewer))
    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == post.id

    missing = await client.get("/api/posts/slug/nope", headers=auth_headers(viewer))
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_partial_update_and_publish(client: AsyncClient, editor, make_post, auth_headers):
    post = await make_post(editor, title="Draft Title", slug="draft-title")
    headers = auth_headers(editor)

    resp = await client.put(f"/api/posts/{post.id}", json={"title": "Better Title"}, headers=headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["title"] == "Better Title"
    assert data["slug"] == "draft-title"
    assert data["content"] == "Content of Draft Title"
    assert data["published_at"] is None

    published = await client.put(f"/api/posts/{post.id}", json={"status": "PUBLISHED"}, headers=headers)
    first_published_at = published.json()["data"]["published_at"]
    assert published.json()["data"]["status"] == "PUBLISHED"
    assert first_published_at is not None

    # Re-sending PUBLISHED is not a transition
    again = await client.put(f"/api/posts/{post.id}", json={"status": "PUBLISHED"}, headers=headers)
    assert again.json()["data"]["published_at"] == first_published_at

    archived = await client.put(f"/api/posts/{post.id}", json={"status": "ARCHIVED"}, headers=headers)
    assert archived.json()["data"]["status"] == "ARCHIVED"
    assert archived.json()["data"]["published_at"] == first_published_at


@pytest.mark.asyncio
async def test_update_to_taken_slug_conflicts(client: AsyncClient, editor, make_post, auth_headers):
    await make_post(editor, title="One", slug="one")
    two = await make_post(editor, title="Two", slug="two")
    resp = await client.put(f"/api/posts/{two.id}", json={"slug": "one"}, headers=auth_headers(editor))
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_list_paginates_newest_first(client: AsyncClient, viewer, editor, make_post, auth_headers):
    for i in range(5):
        await make_post(editor, title=f"Post {i}", slug=f"post-{i}")

    resp = await client.get("/api/posts", params={"page": 1, "limit": 2}, headers=auth_headers(viewer))
    assert resp.status_code == 200
    body = resp.json()
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 5, "total_pages": 3}
    assert [p["slug"] for p in body["data"]] == ["post-4", "post-3"]

    last = await client.get("/api/posts", params={"page": 3, "limit": 2}, headers=auth_headers(viewer))
    assert [p["slug"] for p in last.json()["data"]] == ["post-0"]


@pytest.mark.asyncio
async def test_list_filters_by_status(client: AsyncClient, viewer, editor, make_post, auth_headers):
    await make_post(editor, title="Live", slug="live", status=PostStatus.PUBLISHED)
    await make_post(editor, title="Draft", slug="draft")

    resp = await client.get("/api/posts", params={"status": "PUBLISHED"}, headers=auth_headers(viewer))
    body = resp.json()
    assert body["pagination"]["total"] == 1
    assert body["data"][0]["slug"] == "live"


@pytest.mark.asyncio
async def test_list_caps_limit(client: AsyncClient, viewer, auth_headers):
    resp = await client.get("/api/posts", params={"limit": 1000}, headers=auth_headers(viewer))
    assert resp.status_code == 200
    assert resp.json()["pagination"]["limit"] == 100
    assert resp.json()["pagination"]["total_pages"] == 0


@pytest.mark.asyncio
async def test_list_rejects_bad_page(client: AsyncClient, viewer, auth_headers):
    resp = await client.get("/api/posts", params={"page": 0}, headers=auth_headers(viewer))
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_list_rejects_page_beyond_offset_range(client: AsyncClient, viewer, auth_headers):
    for page in (2**31, 10**19):
        resp = await client.get("/api/posts", params={"page": page}, headers=auth_headers(viewer))
        assert resp.status_code == 400
        assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_list_far_page_is_empty(client: AsyncClient, viewer, auth_headers):
    resp = await client.get("/api/posts", params={"page": 2**31 - 1, "limit": 100}, headers=auth_headers(viewer))
    assert resp.status_code == 200
    assert resp.json()["data"] == []
