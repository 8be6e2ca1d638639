"""FastAPI dependency — JWT auth gate.

``get_current_user`` authenticates the bearer token; ``require_role`` adds a
role check on top of it. Routes that need no role depend on the first only.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from visit_tracker.application.services import auth_service
from visit_tracker.core.exceptions import ForbiddenException, UnauthorizedException
from visit_tracker.domain.models.user import User, UserRole
from visit_tracker.domain.repositories.user_repository import UserRepository
from visit_tracker.interfaces.deps import get_user_repository

# auto_error=False so a missing header is reported through our own 401
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    repo: UserRepository = Depends(get_user_repository),
) -> User:
    """Extract and validate the current user from the JWT token."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Authentication required")

    payload = auth_service.decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedException("Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedException("Invalid token")

    return auth_service.get_current_user(repo, user_id)


def require_role(role: UserRole):
    def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role != role:
            raise ForbiddenException(f"Access denied. {role.value.capitalize()} only.")
        return user

    return dependency


require_admin = require_role(UserRole.ADMIN)
