"""Health check endpoints."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from backend.app.core import database

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness probe. Does not touch the database."""
    return {"success": True, "message": "API is running"}


@router.get("/ready")
async def readiness_check():
    """
    Readiness probe. Fails with 503 when the database cannot answer a trivial query.
    """
    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"success": False, "error": "Database unavailable", "checks": {"database": f"failed: {e}"}},
        )
    return {"success": True, "checks": {"database": "ok"}}
