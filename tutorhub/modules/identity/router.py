"""Identity API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from tutorhub.modules.identity.schemas import LearnerCreate, LearnerRead, UserRead
from tutorhub.modules.identity.service import IdentityService, get_current_user, get_identity_service

router = APIRouter(prefix="/identity", tags=["identity"])


@router.get("/users/me", response_model=UserRead)
async def get_me(current_user=Depends(get_current_user)) -> UserRead:
    """Return profile of authenticated user."""
    return UserRead.model_validate(current_user)


@router.post("/learners", response_model=LearnerRead, status_code=status.HTTP_201_CREATED)
async def create_learner(
    payload: LearnerCreate,
    service: IdentityService = Depends(get_identity_service),
    current_user=Depends(get_current_user),
) -> LearnerRead:
    """Create the learner profile lessons are booked for."""
    learner = await service.create_learner(payload, current_user)
    return LearnerRead.model_validate(learner)
