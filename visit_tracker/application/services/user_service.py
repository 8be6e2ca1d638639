"""User service — account administration for admins."""

from typing import List

import structlog

from visit_tracker.application.services.auth_service import create_account
from visit_tracker.core.exceptions import EntityNotFoundException
from visit_tracker.domain.models.user import UserRole
from visit_tracker.domain.repositories.blob_store import BlobStore
from visit_tracker.domain.repositories.user_repository import UserRepository
from visit_tracker.domain.repositories.visit_repository import VisitRepository
from visit_tracker.domain.schemas.auth import UserRead

logger = structlog.get_logger(__name__)


def list_users(repo: UserRepository) -> List[UserRead]:
    return [UserRead.model_validate(u) for u in repo.list()]


def create_user(repo: UserRepository, name, email, password, role: UserRole | None = None) -> UserRead:
    user = create_account(repo, name, email, password, role)
    logger.info("User created by admin", user_id=user.id, role=user.role.value)
    return UserRead.model_validate(user)


def delete_user(
    repo: UserRepository,
    visit_repo: VisitRepository,
    blob_store: BlobStore,
    user_id: str,
) -> None:
    """Delete a user and, through the cascade, all of their visits.

    The user row and visit rows go in one transaction; the photos are removed
    afterwards on a best-effort basis.
    """
    image_urls = visit_repo.list_image_urls_by_owner(user_id)
    user = repo.delete(user_id)
    if user is None:
        raise EntityNotFoundException("User not found")

    failed = sum(1 for url in image_urls if not blob_store.delete(url))
    logger.info(
        "User deleted",
        user_id=user_id,
        visits_removed=len(image_urls),
        image_deletions_failed=failed,
    )
