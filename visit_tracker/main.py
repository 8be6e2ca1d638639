"""FastAPI application — main entry point."""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from visit_tracker.config import Settings, get_settings
from visit_tracker.core.exceptions import setup_exception_handlers
from visit_tracker.core.logging import configure_logging
from visit_tracker.core.middleware import setup_middleware
from visit_tracker.domain.repositories.blob_store import BlobStore
from visit_tracker.infrastructure.database import Database
from visit_tracker.infrastructure.storage.blob_store import SupabaseBlobStore

from visit_tracker.interfaces.api.auth import router as auth_router
from visit_tracker.interfaces.api.users import router as users_router
from visit_tracker.interfaces.api.visits import router as visits_router

logger = structlog.get_logger(__name__)


def _seed_admin(database: Database, settings: Settings) -> None:
    from visit_tracker.application.services.auth_service import ensure_admin
    from visit_tracker.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

    db = database.session()
    try:
        ensure_admin(
            SQLAlchemyUserRepository(db),
            name=settings.ADMIN_NAME,
            email=settings.ADMIN_EMAIL,
            password=settings.ADMIN_PASSWORD,
        )
    finally:
        db.close()


def create_app(settings: Optional[Settings] = None, blob_store: Optional[BlobStore] = None) -> FastAPI:
    """Build the application.

    ``settings`` drives the database, storage, CORS, logging and bootstrap
    admin. Token signing (``SECRET_KEY``, ``JWT_*``) and ``BCRYPT_ROUNDS`` are
    read once from the environment through ``get_settings()`` when the auth
    modules are imported, so they cannot be overridden here.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan — startup and shutdown events."""
        logger.info("Starting Visit Tracker...", env=settings.ENVIRONMENT)

        database = Database(settings.DATABASE_URL, pool_size=settings.DATABASE_POOL_SIZE)
        database.connect()
        app.state.database = database
        app.state.blob_store = blob_store or SupabaseBlobStore(settings)

        _seed_admin(database, settings)

        try:
            yield
        finally:
            app.state.blob_store.close()
            database.dispose()
            logger.info("Visit Tracker stopped")

    app = FastAPI(
        title="Visit Tracker",
        description="API Backend — field representative site visits",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    setup_middleware(app, settings)
    setup_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(visits_router)

    @app.get("/")
    def root():
        return {
            "name": "Visit Tracker",
            "version": "1.0.0",
            "status": "running",
            "docs": "/docs",
        }

    @app.get("/health")
    def health():
        try:
            app.state.database.ping()
        except Exception as e:
            logger.error("Health check failed", error=str(e))
            return JSONResponse(status_code=503, content={"status": "unhealthy", "database": "unreachable"})
        return {"status": "healthy", "database": "ok"}

    return app


app = create_app()
