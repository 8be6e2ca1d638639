"""
SQLAlchemy Implementation of the Visit Repository.
"""

from typing import List

from sqlalchemy.orm import joinedload

from visit_tracker.domain.models.visit import Visit
from visit_tracker.domain.repositories.visit_repository import Coordinate, VisitRepository
from visit_tracker.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyVisitRepository(SQLAlchemyRepository[Visit], VisitRepository):
    """Visit repository implementation using SQLAlchemy."""

    def create(
        self,
        user_id: str,
        place_name: str,
        latitude: Coordinate,
        longitude: Coordinate,
        image_url: str,
    ) -> Visit:
        return super().create(
            {
                "user_id": user_id,
                "place_name": place_name,
                "latitude": latitude,
                "longitude": longitude,
                "image_url": image_url,
            }
        )

    def list_by_owner(self, user_id: str) -> List[Visit]:
        return (
            self.db.query(Visit)
            .filter(Visit.user_id == user_id)
            .order_by(Visit.created_at.desc())
            .all()
        )

    def list_all_with_owner(self) -> List[Visit]:
        return (
            self.db.query(Visit)
            .options(joinedload(Visit.user))
            .order_by(Visit.created_at.desc())
            .all()
        )

    def list_image_urls_by_owner(self, user_id: str) -> List[str]:
        rows = self.db.query(Visit.image_url).filter(Visit.user_id == user_id).all()
        return [r[0] for r in rows]
