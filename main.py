"""
Agrocarbon API: satellite (NDVI) verification and registry for farm carbon credits.
"""
import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agrocarbon.core.config import get_settings
from agrocarbon.core.constants import VERIFICATION_ALGORITHM
from agrocarbon.core.database import init_db, close_db
from agrocarbon.core.logger import logger
from agrocarbon.routes import health, verification, farmers, credits, reports

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create registry tables on startup, release the engine on shutdown."""
    await init_db()
    logger.info(f"{settings.app_name} {settings.app_version} started on port {settings.port}")
    yield
    await close_db()
    logger.info(f"{settings.app_name} stopped")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="NDVI-based verification and registry for farm carbon credits",
    lifespan=lifespan
)

# The registry front end calls the API from another origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (health, verification, farmers, credits, reports):
    app.include_router(module.router)


@app.get("/")
async def root():
    """Service banner with the verification model in use."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "algorithm": VERIFICATION_ALGORITHM,
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower()
    )
