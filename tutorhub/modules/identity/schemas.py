"""Identity schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from tutorhub.core.enums import RoleEnum


class RoleRead(BaseModel):
    """Role response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: RoleEnum


class UserRead(BaseModel):
    """User output schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    full_name: str
    timezone: str
    is_active: bool
    role: RoleRead
    created_at: datetime
    updated_at: datetime


class LearnerCreate(BaseModel):
    """Create learner profile request."""

    name: str = Field(min_length=1, max_length=255)


class LearnerRead(BaseModel):
    """Learner profile response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    parent_id: UUID
    name: str
    created_at: datetime
