"""
Health check endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from agrocarbon.core.config import get_settings
from agrocarbon.core.database import get_session

router = APIRouter(prefix="/health", tags=["health"])
settings = get_settings()


@router.get("/")
async def health_check():
    """Root health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version
    }


@router.get("/live")
async def liveness():
    """Liveness probe endpoint."""
    return {"status": "alive"}


@router.get("/ready")
async def readiness(session: AsyncSession = Depends(get_session)):
    """Readiness probe: the registry database answers a trivial query."""
    await session.execute(text("SELECT 1"))
    return {"status": "ready"}
