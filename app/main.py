"""Survey device scheduler — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.adapters.persistence.database import engine
from app.config import settings
from app.infrastructure.api.errors import register_exception_handlers
from app.infrastructure.api.routes_assignments import router as assignments_router
from app.infrastructure.api.routes_health import router as health_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    if settings.storage_backend == "sql":
        try:
            async with engine.begin():
                pass  # Connection pool warmed up
            logger.info("Database connection established")
        except Exception as e:
            logger.warning("Database not available on startup: %s", e)
    else:
        logger.info("Running with the in-memory assignment store")
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Survey Device Scheduler",
        description="Device-to-survey assignment scheduling with conflict detection",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS for the admin UI
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(assignments_router, prefix="/api")

    return app


app = create_app()
