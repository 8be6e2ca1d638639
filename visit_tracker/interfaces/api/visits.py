"""Visit API routes — log, list and delete site visits."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status

from visit_tracker.application.services import visit_service
from visit_tracker.domain.models.user import User
from visit_tracker.domain.repositories.blob_store import BlobStore
from visit_tracker.domain.repositories.visit_repository import VisitRepository
from visit_tracker.domain.schemas.visit import VisitDeleted, VisitRead
from visit_tracker.interfaces.api.deps import get_current_user, require_admin
from visit_tracker.interfaces.deps import get_blob_store, get_visit_repository

router = APIRouter(prefix="/visits", tags=["Visits"])


@router.post("", response_model=VisitRead, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
def create_visit(
    request: Request,
    image: Optional[UploadFile] = File(None),
    place_name: Optional[str] = Form(None, alias="placeName"),
    latitude: Optional[str] = Form(None),
    longitude: Optional[str] = Form(None),
    repo: VisitRepository = Depends(get_visit_repository),
    blob_store: BlobStore = Depends(get_blob_store),
    user: User = Depends(get_current_user),
):
    image_bytes = None
    if image is not None and image.filename:
        # One byte past the cap is enough for the store to reject oversized uploads
        max_bytes = request.app.state.settings.MAX_UPLOAD_BYTES
        image_bytes = image.file.read(max_bytes + 1)

    return visit_service.create_visit(
        repo,
        blob_store,
        owner_id=user.id,
        place_name=place_name,
        latitude=latitude,
        longitude=longitude,
        image_bytes=image_bytes,
        original_name=image.filename if image is not None else None,
        mime_type=image.content_type if image is not None else None,
    )


@router.get("/my-visits", response_model=List[VisitRead], response_model_exclude_none=True)
def my_visits(
    repo: VisitRepository = Depends(get_visit_repository),
    user: User = Depends(get_current_user),
):
    return visit_service.get_visits_by_owner(repo, user.id)


@router.get("/all", response_model=List[VisitRead], response_model_exclude_none=True)
def all_visits(
    repo: VisitRepository = Depends(get_visit_repository),
    admin: User = Depends(require_admin),
):
    return visit_service.get_all_visits(repo)


@router.get("/user/{user_id}", response_model=List[VisitRead], response_model_exclude_none=True)
def user_visits(
    user_id: str,
    repo: VisitRepository = Depends(get_visit_repository),
    admin: User = Depends(require_admin),
):
    return visit_service.get_visits_by_owner(repo, user_id)


@router.delete("/{visit_id}", response_model=VisitDeleted, response_model_exclude_none=True)
def delete_visit(
    visit_id: str,
    repo: VisitRepository = Depends(get_visit_repository),
    blob_store: BlobStore = Depends(get_blob_store),
    user: User = Depends(get_current_user),
):
    visit = visit_service.delete_visit(repo, blob_store, visit_id, user)
    return VisitDeleted(message="Visit deleted successfully", visit=visit)
