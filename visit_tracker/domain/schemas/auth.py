"""Pydantic schemas for User and Auth."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from visit_tracker.domain.models.user import UserRole


class UserCreate(BaseModel):
    # Presence is checked by the service so missing fields surface as a single message
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[UserRole] = None


class UserRead(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class TokenResponse(BaseModel):
    user: UserRead
    token: str
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    message: str
