"""
Pytest configuration and fixtures.

The environment is prepared before the app is imported: settings are read
once, and the module-level engine is built from DATABASE_URL.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from typing import AsyncGenerator, Awaitable, Callable, Dict, Optional

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app.main import app
from backend.app.core.database import Base, build_engine, get_db
from backend.app.core.security import create_user_token, hash_password
from backend.app.models import PostORM, TenantORM, UserORM
from backend.app.plugins.newsletter import service as newsletter_service
from backend.app.schemas.posts import PostStatus
from backend.app.schemas.users import Role

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "password123"

# build_engine switches on SQLite foreign keys so ON DELETE CASCADE is enforced
engine = build_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest.fixture(autouse=True)
def reset_newsletter_state():
    """The newsletter plugin keeps process-wide in-memory stores."""
    newsletter_service._newsletter_service = None
    newsletter_service._subscriber_service = None
    yield
    newsletter_service._newsletter_service = None
    newsletter_service._subscriber_service = None


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Fresh schema per test. The session is for arranging and inspecting data;
    requests get their own sessions through the get_db override.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestingSessionLocal() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Test client with the database dependency pointed at the test engine."""

    async def override_get_db():
        async with TestingSessionLocal() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def make_tenant(db_session: AsyncSession) -> Callable[..., Awaitable[TenantORM]]:
    async def _make(slug: str = "acme-corp", name: Optional[str] = None, domain: Optional[str] = None) -> TenantORM:
        tenant = TenantORM(name=name or slug.replace("-", " ").title(), slug=slug, domain=domain)
        db_session.add(tenant)
        await db_session.commit()
        return tenant

    return _make


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[UserORM]]:
    async def _make(
        tenant: TenantORM,
        role: Role = Role.VIEWER,
        email: Optional[str] = None,
        name: Optional[str] = None,
    ) -> UserORM:
        user = UserORM(
            email=email or f"{role.value.lower()}@{tenant.slug}.com",
            name=name or f"{role.value.title()} User",
            hashed_password=hash_password(TEST_PASSWORD),
            role=role.value,
            tenant_id=tenant.id,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make


@pytest.fixture
def make_post(db_session: AsyncSession) -> Callable[..., Awaitable[PostORM]]:
    async def _make(
        author: UserORM,
        title: str = "Hello World",
        slug: str = "hello-world",
        status: PostStatus = PostStatus.DRAFT,
    ) -> PostORM:
        post = PostORM(
            title=title,
            slug=slug,
            content=f"Content of {title}",
            status=status.value,
            author_id=author.id,
            tenant_id=author.tenant_id,
        )
        db_session.add(post)
        await db_session.commit()
        return post

    return _make


def _auth_headers(user: UserORM) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def auth_headers() -> Callable[[UserORM], Dict[str, str]]:
    """Bearer header for a persisted user."""
    return _auth_headers


@pytest.fixture
async def tenant(make_tenant) -> TenantORM:
    return await make_tenant("acme-corp")


@pytest.fixture
async def admin(make_user, tenant) -> UserORM:
    return await make_user(tenant, Role.ADMIN)


@pytest.fixture
async def editor(make_user, tenant) -> UserORM:
    return await make_user(tenant, Role.EDITOR)


@pytest.fixture
async def viewer(make_user, tenant) -> UserORM:
    return await make_user(tenant, Role.VIEWER)
