"""User administration routes — admin only."""

from typing import List

from fastapi import APIRouter, Depends, status

from visit_tracker.application.services import user_service
from visit_tracker.domain.models.user import User
from visit_tracker.domain.repositories.blob_store import BlobStore
from visit_tracker.domain.repositories.user_repository import UserRepository
from visit_tracker.domain.repositories.visit_repository import VisitRepository
from visit_tracker.domain.schemas.auth import MessageResponse, UserCreate, UserRead
from visit_tracker.interfaces.api.deps import require_admin
from visit_tracker.interfaces.deps import get_blob_store, get_user_repository, get_visit_repository

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=List[UserRead])
def list_users(
    repo: UserRepository = Depends(get_user_repository),
    admin: User = Depends(require_admin),
):
    return user_service.list_users(repo)


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    repo: UserRepository = Depends(get_user_repository),
    admin: User = Depends(require_admin),
):
    return user_service.create_user(repo, body.name, body.email, body.password, body.role)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    repo: UserRepository = Depends(get_user_repository),
    visit_repo: VisitRepository = Depends(get_visit_repository),
    blob_store: BlobStore = Depends(get_blob_store),
    admin: User = Depends(require_admin),
):
    """Delete a user and all of their visits."""
    user_service.delete_user(repo, visit_repo, blob_store, user_id)
    return MessageResponse(message="User deleted successfully")
