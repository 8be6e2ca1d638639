"""User domain model — maps to the 'users' table."""

import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, String
from sqlalchemy.orm import deferred, relationship

from visit_tracker.domain.models.base import utcnow
from visit_tracker.infrastructure.database import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    REP = "rep"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    # Only loaded on demand by the credential lookup; any other access raises
    password_hash = deferred(Column(String(255), nullable=False), raiseload=True)
    role = Column(
        Enum(UserRole, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=UserRole.REP,
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Visits are removed by the ON DELETE CASCADE foreign key in the same transaction
    visits = relationship(
        "Visit",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User {self.email} ({self.role.value if self.role else None})>"
