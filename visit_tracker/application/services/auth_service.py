"""Auth service — registration, login and JWT token management."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt

from visit_tracker.config import get_settings
from visit_tracker.core.exceptions import UnauthorizedException, ValidationException
from visit_tracker.domain.models.user import User, UserRole
from visit_tracker.domain.repositories.user_repository import UserRepository
from visit_tracker.domain.schemas.auth import TokenResponse, UserRead

settings = get_settings()
logger = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    )
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Return the token payload, or None if it is malformed, expired or wrongly signed."""
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        return payload
    except JWTError:
        return None


def require_fields(**fields) -> None:
    missing = [name for name, value in fields.items() if value is None or not str(value).strip()]
    if missing:
        raise ValidationException(f"Missing required fields: {', '.join(missing)}", details={"missing": missing})


def create_account(
    repo: UserRepository,
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    role: Optional[UserRole] = None,
) -> User:
    """Validate presence and create a user. Raises ConflictException on duplicate email."""
    require_fields(name=name, email=email, password=password)
    return repo.create(name=name, email=email, password=password, role=role or UserRole.REP)


def register(
    repo: UserRepository,
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    role: Optional[UserRole] = None,
) -> TokenResponse:
    user = create_account(repo, name, email, password, role)
    logger.info("User registered", user_id=user.id, role=user.role.value)
    return TokenResponse(
        user=UserRead.model_validate(user),
        token=create_access_token(user.id),
    )


def login(repo: UserRepository, email: Optional[str], password: Optional[str]) -> TokenResponse:
    """Authenticate by email and password.

    Unknown email and wrong password fail identically, with the same message
    and one bcrypt check each, so callers cannot tell which one was wrong.
    """
    require_fields(email=email, password=password)

    user = repo.get_by_email(email)
    password_hash = user.password_hash if user is not None else None
    if not repo.verify_password(password, password_hash):
        logger.info("Login failed")
        raise UnauthorizedException(INVALID_CREDENTIALS)

    return TokenResponse(
        user=UserRead.model_validate(user),
        token=create_access_token(user.id),
    )


def get_current_user(repo: UserRepository, user_id: str) -> User:
    """Resolve a token subject; fails if the user was deleted after issuance."""
    user = repo.get_by_id(user_id)
    if user is None:
        raise UnauthorizedException("User not found")
    return user


def ensure_admin(repo: UserRepository, name: str, email: Optional[str], password: Optional[str]) -> Optional[User]:
    """Create the bootstrap administrator if configured and missing."""
    if not email or not password:
        return None
    existing = repo.get_by_email(email)
    if existing:
        return existing
    admin = repo.create(name=name, email=email, password=password, role=UserRole.ADMIN)
    logger.info("Bootstrap admin created", email=admin.email)
    return admin
