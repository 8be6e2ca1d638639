"""Database engine, session factory and schema provisioning.

The engine is owned by a ``Database`` instance created during application
startup and stored on ``app.state``; request handlers obtain sessions through
the ``get_db`` dependency.
"""

from typing import Generator

import structlog
from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = structlog.get_logger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the SQLAlchemy engine and session factory for one application."""

    def __init__(self, url: str, pool_size: int = 5):
        self.url = url
        self.pool_size = pool_size
        self.engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def connect(self) -> None:
        """Create the engine, verify the server is reachable and provision the schema."""
        if self.is_sqlite:
            self.engine = create_engine(self.url, connect_args={"check_same_thread": False})
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self.engine = create_engine(self.url, pool_size=self.pool_size, pool_pre_ping=True)

        self._session_factory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

        self.ping()
        logger.info("Database connection verified", dialect=self.engine.dialect.name)

        # Import models so they are registered on Base.metadata
        from visit_tracker.domain.models import user, visit  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created/verified")

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database.connect() must be called before opening sessions")
        return self._session_factory()

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database connections closed")
        self.engine = None
        self._session_factory = None


def get_db(request: Request) -> Generator[Session, None, None]:
    """FastAPI dependency — one session per request."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
