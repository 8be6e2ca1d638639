"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import Any, List, Optional, Protocol, TypeVar

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic lookups and deletion."""

    def get_by_id(self, id: str) -> Optional[T]:
        """Get a single entity by ID."""
        ...

    def list(self) -> List[T]:
        """List entities, newest first."""
        ...

    def create(self, obj_in: Any) -> T:
        """Create a new entity."""
        ...

    def delete(self, id: str) -> Optional[T]:
        """Delete an entity by ID."""
        ...
