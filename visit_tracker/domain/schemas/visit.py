"""Pydantic schemas for Visits.

Visits are serialized in camelCase, as consumed by the field app.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from visit_tracker.domain.models.user import UserRole


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Location(CamelModel):
    latitude: float
    longitude: float


class VisitOwner(CamelModel):
    id: str
    name: str
    email: str
    role: UserRole

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class VisitRead(CamelModel):
    id: str
    user_id: str
    place_name: str
    location: Location
    image_url: str
    created_at: Optional[datetime] = None
    user: Optional[VisitOwner] = None


class VisitDeleted(BaseModel):
    message: str
    visit: VisitRead
