"""
Visit Repository Interface.
"""

from decimal import Decimal
from typing import List, Optional, Union

from visit_tracker.domain.repositories.base import BaseRepository
from visit_tracker.domain.models.visit import Visit

Coordinate = Union[float, Decimal]


class VisitRepository(BaseRepository[Visit]):
    """Interface for Visit-specific operations."""

    def create(
        self,
        user_id: str,
        place_name: str,
        latitude: Coordinate,
        longitude: Coordinate,
        image_url: str,
    ) -> Visit:
        """Insert a visit row."""
        ...

    def list_by_owner(self, user_id: str) -> List[Visit]:
        """Get a user's visits, newest first."""
        ...

    def list_all_with_owner(self) -> List[Visit]:
        """Get all visits with their owner loaded, newest first."""
        ...

    def list_image_urls_by_owner(self, user_id: str) -> List[str]:
        """Get the image URLs of every visit owned by a user."""
        ...
