"""Lessons schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from tutorhub.core.enums import LessonStatusEnum


class LessonStatusUpdate(BaseModel):
    """Change lesson status request."""

    status: LessonStatusEnum


class LessonRead(BaseModel):
    """Lesson response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    teacher_id: UUID
    student_id: UUID
    learner_id: UUID | None
    subject_id: UUID | None
    scheduled_time: datetime
    duration_minutes: int
    status: LessonStatusEnum
    price: Decimal
    created_at: datetime
    updated_at: datetime
