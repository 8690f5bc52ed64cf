"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from skillpath.activity.router import router as activity_router
from skillpath.auth.router import router as auth_router
from skillpath.config import get_settings
from skillpath.database import close_db, init_db
from skillpath.health.router import router as health_router
from skillpath.middleware import setup_middleware
from skillpath.profiles.router import router as profile_router
from skillpath.redis_client import close_redis, init_redis
from skillpath.users.router import router as users_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)
    logger.info("startup_complete", environment=settings.environment, version=settings.app_version)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="SkillPath API",
        description="Learning-progress tracking with XP, levels, streaks and career readiness",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(activity_router)
    app.include_router(profile_router)
    app.include_router(users_router)

    return app


app = create_app()
