"""
User Repository Interface (credential store).
"""

from typing import Optional

from visit_tracker.domain.repositories.base import BaseRepository
from visit_tracker.domain.models.user import User, UserRole


class UserRepository(BaseRepository[User]):
    """Interface for user persistence and secret handling.

    Implementations normalize emails (trimmed, lowercased) on every write and
    lookup, and never hand out password hashes except through
    ``get_by_email``.
    """

    def create(self, name: str, email: str, password: str, role: UserRole = UserRole.REP) -> User:
        """Hash the password and insert.

        Raises ConflictException on duplicate email and ValidationException
        when the password cannot be hashed.
        """
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by normalized email, including the password hash."""
        ...

    def verify_password(self, candidate: str, password_hash: Optional[str]) -> bool:
        """Check a candidate password against a stored hash.

        A ``None`` hash still costs one hash computation and returns False.
        """
        ...

    def update_password(self, id: str, new_password: str) -> Optional[User]:
        """Re-hash and store a new password."""
        ...
