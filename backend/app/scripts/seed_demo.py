"""
Demo data seeder.

Creates two tenants with an ADMIN, EDITOR and VIEWER each, plus a published
and a draft post per tenant. Safe to run repeatedly: existing rows are kept.

    python -m backend.app.scripts.seed_demo
"""
import asyncio
import argparse
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import get_settings
from backend.app.core.database import Base, engine, get_db_context
from backend.app.core.logging import get_logger, setup_logging
from backend.app.core.security import hash_password
from backend.app.models import PostORM, TenantORM, UserORM
from backend.app.schemas.posts import PostStatus
from backend.app.schemas.users import Role

logger = get_logger(__name__)

DEMO_PASSWORD = "password123"

DEMO_TENANTS = [
    {
        "name": "Acme Corp",
        "slug": "acme-corp",
        "domain": "acme.example.com",
        "users": [
            ("admin@acme.com", "Admin User", Role.ADMIN),
            ("editor@acme.com", "Editor User", Role.EDITOR),
            ("viewer@acme.com", "Viewer User", Role.VIEWER),
        ],
    },
    {
        "name": "Demo Organization",
        "slug": "demo-org",
        "domain": "demo.example.com",
        "users": [
            ("admin@demo.com", "Demo Admin", Role.ADMIN),
            ("editor@demo.com", "Demo Editor", Role.EDITOR),
            ("viewer@demo.com", "Demo Viewer", Role.VIEWER),
        ],
    },
]


async def _get_or_create_tenant(session: AsyncSession, entry: dict) -> TenantORM:
    result = await session.execute(select(TenantORM).where(TenantORM.slug == entry["slug"]))
    tenant = result.scalar_one_or_none()
    if tenant is None:
        tenant = TenantORM(name=entry["name"], slug=entry["slug"], domain=entry["domain"])
        session.add(tenant)
        await session.flush()
        logger.info(f"Created tenant {tenant.slug}")
    return tenant


async def _get_or_create_user(
    session: AsyncSession, tenant: TenantORM, email: str, name: str, role: Role, hashed: str
) -> UserORM:
    result = await session.execute(
        select(UserORM).where(UserORM.email == email, UserORM.tenant_id == tenant.id)
    )
    user = result.scalar_one_or_none()
    if user is None:
        user = UserORM(email=email, name=name, hashed_password=hashed, role=role.value, tenant_id=tenant.id)
        session.add(user)
        await session.flush()
        logger.info(f"Created {role.value} {email} in {tenant.slug}")
    return user


async def _ensure_post(session: AsyncSession, tenant: TenantORM, author: UserORM, slug: str, **fields) -> None:
    result = await session.execute(
        select(PostORM.id).where(PostORM.slug == slug, PostORM.tenant_id == tenant.id)
    )
    if result.first():
        return
    session.add(PostORM(slug=slug, tenant_id=tenant.id, author_id=author.id, **fields))
    logger.info(f"Created post {slug} in {tenant.slug}")


async def seed(create_tables: bool = False):
    if create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    hashed = hash_password(DEMO_PASSWORD)

    async with get_db_context() as session:
        for entry in DEMO_TENANTS:
            tenant = await _get_or_create_tenant(session, entry)
            users = [
                await _get_or_create_user(session, tenant, email, name, role, hashed)
                for email, name, role in entry["users"]
            ]
            admin, editor = users[0], users[1]

            await _ensure_post(
                session, tenant, admin,
                slug=f"welcome-to-{tenant.slug}",
                title=f"Welcome to {tenant.name}",
                content=f"This is the first post on the {tenant.name} blog.",
                excerpt="Our first post",
                status=PostStatus.PUBLISHED.value,
                published_at=datetime.now(timezone.utc),
            )
            await _ensure_post(
                session, tenant, editor,
                slug="upcoming-features",
                title="Upcoming Features",
                content="A draft outlining what we are working on next.",
                status=PostStatus.DRAFT.value,
            )

    await engine.dispose()
    logger.info(f"Seed complete. Demo users share the password '{DEMO_PASSWORD}'.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo tenants, users and posts.")
    parser.add_argument("--create-tables", action="store_true", help="Create tables before seeding")
    args = parser.parse_args()

    setup_logging(level=get_settings().log_level)
    asyncio.run(seed(create_tables=args.create_tables))
