"""
SQLAlchemy Implementation of the User Repository (credential store).
"""

from typing import Optional

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, undefer

from visit_tracker.config import get_settings
from visit_tracker.core.exceptions import ConflictException, ValidationException
from visit_tracker.domain.models.user import User, UserRole
from visit_tracker.domain.repositories.user_repository import UserRepository
from visit_tracker.infrastructure.repositories.base_repository import SQLAlchemyRepository

settings = get_settings()
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy and bcrypt.

    ``User.password_hash`` is a raising deferred column: rows returned by
    ``get_by_id``, ``list`` and ``create`` do not carry it. Only
    ``get_by_email`` loads it, for login.
    """

    def __init__(self, db: Session, model=User, password_context: CryptContext = pwd_context):
        super().__init__(db, model)
        self.pwd_context = password_context

    def _hash(self, password: str) -> str:
        try:
            return self.pwd_context.hash(password)
        except ValueError as exc:
            # e.g. bcrypt rejects NUL bytes
            raise ValidationException("Invalid password") from exc

    def create(self, name: str, email: str, password: str, role: UserRole = UserRole.REP) -> User:
        user = User(
            name=name.strip(),
            email=normalize_email(email),
            password_hash=self._hash(password),
            role=role,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictException("Email already registered") from exc
        self.db.refresh(user)
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return (
            self.db.query(User)
            .options(undefer(User.password_hash))
            .filter(User.email == normalize_email(email))
            .first()
        )

    def verify_password(self, candidate: str, password_hash: Optional[str]) -> bool:
        if password_hash is None:
            # Unknown account: spend the same bcrypt time as a real check
            self.pwd_context.dummy_verify()
            return False
        try:
            return self.pwd_context.verify(candidate, password_hash)
        except (ValueError, TypeError):
            # Malformed or unknown hash format counts as a mismatch
            return False

    def update_password(self, id: str, new_password: str) -> Optional[User]:
        user = self.get_by_id(id)
        if user is None:
            return None
        user.password_hash = self._hash(new_password)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(user)
        return user
