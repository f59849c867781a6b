"""caseflow — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from caseflow.adapters.persistence.database import engine
from caseflow.config import settings
from caseflow.infrastructure.api.routes_assignments import router as assignments_router
from caseflow.infrastructure.api.routes_health import router as health_router
from caseflow.infrastructure.api.routes_officers import router as officers_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )

    app = FastAPI(
        title="caseflow — Collections Caseload Assignment",
        description="Specialization- and capacity-aware assignment of delinquent accounts",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(officers_router, prefix="/api")
    app.include_router(assignments_router, prefix="/api")

    return app


app = create_app()
