"""
noblogg - multi-tenant blogging API

FastAPI application entry point.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api import auth, health, posts, tenants, users
from backend.app.api.errors import register_error_handlers
from backend.app.core.config import get_settings
from backend.app.core.database import Base, engine
from backend.app.core.logging import get_logger, setup_logging
from backend.app.core.observability import setup_tracing
from backend.app.middleware.trace import TracingMiddleware
from backend.app.plugins.registry import register_plugins

settings = get_settings()

setup_logging(level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.environment})")

    if settings.auto_create_tables:
        import backend.app.models  # noqa: F401  registers tables on Base.metadata

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    yield

    logger.info(f"Shutting down {settings.app_name}")
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Multi-tenant blogging platform with role-based access control",
    version=settings.app_version,
    lifespan=lifespan,
)

setup_tracing(app)

app.add_middleware(TracingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Correlation-ID", "X-Tenant-ID"],
)

register_error_handlers(app)

app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, prefix=f"{settings.api_prefix}/auth", tags=["Authentication"])
app.include_router(tenants.router, prefix=f"{settings.api_prefix}/tenants", tags=["Tenants"])
app.include_router(users.router, prefix=f"{settings.api_prefix}/users", tags=["Users"])
app.include_router(posts.router, prefix=f"{settings.api_prefix}/posts", tags=["Posts"])

register_plugins(app, settings.enabled_plugins, api_prefix=settings.api_prefix)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Multi-tenant blogging API",
        "docs": "/docs",
    }
