"""Users API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map UsersApiError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Store chosen in the lifespan: DatabaseSessionManager or in-memory repository,
      unless create_app() was handed one already

Design Decisions:
    - create_app() factory: every dependency is passed in or built from Settings,
      tests build their own app around an in-memory or SQLite store
    - Lifespan over @app.on_event
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import health, users
from app.config import Settings, get_settings
from app.core.repository_protocols import UserRepository
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.in_memory_user_repository import InMemoryUserRepository
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)

    owned_manager = None
    if app.state.user_repository is None and app.state.db_manager is None:
        if settings.user_store == "memory":
            app.state.user_repository = InMemoryUserRepository()
            logger.warning("Using in-memory user store; data is lost on restart")
        else:
            owned_manager = DatabaseSessionManager.from_url(
                settings.database_url,
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
            )
            app.state.db_manager = owned_manager
    logger.info("Users API started")
    yield
    logger.info("Users API shutting down")
    if owned_manager is not None:
        await owned_manager.dispose()


def create_app(
    settings: Settings | None = None,
    user_repository: UserRepository | None = None,
    db_manager: DatabaseSessionManager | None = None,
) -> FastAPI:
    """Build the application. Pass a repository or manager to skip lifespan setup."""
    settings = settings or get_settings()
    app = FastAPI(title="Users API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.user_repository = user_repository
    app.state.db_manager = db_manager

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes — explicit registration
    app.include_router(health.router)
    app.include_router(users.router)

    register_error_handlers(app)
    return app


app = create_app()
