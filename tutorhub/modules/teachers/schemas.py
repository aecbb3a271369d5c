"""Teachers schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class TeacherProfileCreate(BaseModel):
    """Create teacher profile request."""

    user_id: UUID
    display_name: str = Field(min_length=2, max_length=128)
    bio: str = Field(default="", max_length=5000)


class TeacherProfileRead(BaseModel):
    """Teacher profile response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    display_name: str
    bio: str
    is_approved: bool
    created_at: datetime


class SubjectCreate(BaseModel):
    slug: str = Field(min_length=2, max_length=64, pattern=r"^[a-z0-9-]+$")
    name: str = Field(min_length=2, max_length=128)


class SubjectRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    slug: str
    name: str
