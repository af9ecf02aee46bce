"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import get_session
from app.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_session)):
    """Check API and database connectivity."""
    if settings.storage_backend == "memory":
        db_status = "in-memory"
    else:
        try:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
            db_status = "connected"
        except Exception as e:
            db_status = f"error: {e}"

    return {
        "status": "degraded" if db_status.startswith("error") else "ok",
        "database": db_status,
        "service": "Survey Device Assignment Scheduler",
    }
