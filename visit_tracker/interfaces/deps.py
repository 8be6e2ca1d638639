"""
API Dependencies.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from visit_tracker.domain.models.user import User
from visit_tracker.domain.models.visit import Visit
from visit_tracker.domain.repositories.blob_store import BlobStore
from visit_tracker.domain.repositories.user_repository import UserRepository
from visit_tracker.domain.repositories.visit_repository import VisitRepository
from visit_tracker.infrastructure.database import get_db
from visit_tracker.infrastructure.repositories.user_repository import SQLAlchemyUserRepository
from visit_tracker.infrastructure.repositories.visit_repository import SQLAlchemyVisitRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


def get_visit_repository(db: Session = Depends(get_db)) -> VisitRepository:
    """Get visit repository instance."""
    return SQLAlchemyVisitRepository(db, Visit)


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store
