"""Visit service — photo upload, visit persistence and ownership policy.

Creating a visit is a two-step write across independent systems: the photo
goes to the blob store first and the metadata row second. If the row cannot
be written the photo stays orphaned in storage; a row never points at a photo
that was not stored.
"""

import math
from typing import Any, List, Optional

import structlog

from visit_tracker.core.exceptions import (
    EntityNotFoundException,
    ForbiddenException,
    ValidationException,
)
from visit_tracker.domain.models.user import User, UserRole
from visit_tracker.domain.models.visit import Visit
from visit_tracker.domain.repositories.blob_store import BlobStore
from visit_tracker.domain.repositories.visit_repository import VisitRepository
from visit_tracker.domain.schemas.visit import Location, VisitOwner, VisitRead

logger = structlog.get_logger(__name__)


def format_visit(visit: Visit, include_owner: bool = False) -> VisitRead:
    """Shape a stored visit for callers; coordinates are always floats."""
    return VisitRead(
        id=visit.id,
        user_id=visit.user_id,
        place_name=visit.place_name,
        location=Location(
            latitude=float(visit.latitude),
            longitude=float(visit.longitude),
        ),
        image_url=visit.image_url,
        created_at=visit.created_at,
        user=VisitOwner.model_validate(visit.user) if include_owner and visit.user else None,
    )


def _parse_coordinate(value: Any, name: str, limit: float) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationException(f"{name} is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationException(f"{name} must be a number") from None
    if not math.isfinite(number) or not -limit <= number <= limit:
        raise ValidationException(f"{name} must be between {-limit:g} and {limit:g}")
    return number


def validate_visit_input(place_name: Optional[str], latitude: Any, longitude: Any) -> tuple[str, float, float]:
    if place_name is None or not place_name.strip():
        raise ValidationException("placeName is required")
    return (
        place_name.strip(),
        _parse_coordinate(latitude, "latitude", 90),
        _parse_coordinate(longitude, "longitude", 180),
    )


def create_visit(
    repo: VisitRepository,
    blob_store: BlobStore,
    owner_id: str,
    place_name: Optional[str],
    latitude: Any,
    longitude: Any,
    image_bytes: Optional[bytes],
    original_name: Optional[str],
    mime_type: Optional[str],
) -> VisitRead:
    """Validate, upload the photo, then persist the visit (in that order)."""
    place_name, lat, lng = validate_visit_input(place_name, latitude, longitude)
    if image_bytes is None:
        raise ValidationException("Image is required")

    # Raises ValidationException/StorageException; nothing is written to the DB on failure
    image_url = blob_store.put(image_bytes, original_name or "", mime_type)

    try:
        visit = repo.create(
            user_id=owner_id,
            place_name=place_name,
            latitude=lat,
            longitude=lng,
            image_url=image_url,
        )
    except Exception:
        logger.error("Visit row not written, image left orphaned", user_id=owner_id, image_url=image_url)
        raise

    logger.info("Visit created", visit_id=visit.id, user_id=owner_id)
    return format_visit(visit)


def get_visits_by_owner(repo: VisitRepository, owner_id: str) -> List[VisitRead]:
    return [format_visit(v) for v in repo.list_by_owner(owner_id)]


def get_all_visits(repo: VisitRepository) -> List[VisitRead]:
    """All visits with minimal owner identity. Admin-only; enforced by the route."""
    return [format_visit(v, include_owner=True) for v in repo.list_all_with_owner()]


def get_visit_by_id(repo: VisitRepository, visit_id: str) -> Optional[VisitRead]:
    visit = repo.get_by_id(visit_id)
    return format_visit(visit) if visit else None


def can_delete(requester: User, visit: Visit) -> bool:
    return requester.role == UserRole.ADMIN or requester.id == visit.user_id


def delete_visit(repo: VisitRepository, blob_store: BlobStore, visit_id: str, requester: User) -> VisitRead:
    """Delete a visit owned by the requester (any visit for admins).

    The row is removed first; the photo removal is best-effort and never
    fails the call. Returns the visit as it was before deletion.
    """
    visit = repo.get_by_id(visit_id)
    if visit is None:
        raise EntityNotFoundException("Visit not found")
    if not can_delete(requester, visit):
        raise ForbiddenException("Not authorized to delete this visit")

    snapshot = format_visit(visit)
    repo.delete(visit_id)

    if not blob_store.delete(snapshot.image_url):
        logger.warning("Visit deleted but image removal failed", visit_id=visit_id, image_url=snapshot.image_url)

    logger.info("Visit deleted", visit_id=visit_id, requester_id=requester.id, role=requester.role.value)
    return snapshot
