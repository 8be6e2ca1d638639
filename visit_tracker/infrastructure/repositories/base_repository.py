"""
SQLAlchemy implementation of the Base Repository.
"""

from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from visit_tracker.domain.repositories.base import BaseRepository
from visit_tracker.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models."""

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, id: str) -> Optional[ModelType]:
        return self.db.query(self.model).filter(self.model.id == id).first()

    def list(self) -> List[ModelType]:
        return self.db.query(self.model).order_by(self.model.created_at.desc()).all()

    def create(self, obj_in: Any) -> ModelType:
        obj_data = obj_in.model_dump(exclude_unset=True) if hasattr(obj_in, "model_dump") else obj_in

        db_obj = self.model(**obj_data)
        self.db.add(db_obj)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(db_obj)
        return db_obj

    def delete(self, id: str) -> Optional[ModelType]:
        obj = self.get_by_id(id)
        if obj:
            self.db.delete(obj)
            try:
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
        return obj
