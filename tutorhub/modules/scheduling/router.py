"""Scheduling API router."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from tutorhub.integrations.edge_functions import (
    AvailableSlotsResponse,
    EdgeFunctionsClient,
    get_edge_functions_client,
)
from tutorhub.modules.identity.service import get_current_user
from tutorhub.modules.scheduling.schemas import (
    OneOffAvailabilityCreate,
    OneOffAvailabilityRead,
    RecurringAvailabilityCreate,
    RecurringAvailabilityRead,
    TimeSlotRead,
    WeekSlotsRead,
)
from tutorhub.modules.scheduling.service import SchedulingService, get_scheduling_service, search_remote_slots

router = APIRouter(prefix="/scheduling", tags=["scheduling"])


@router.get("/teachers/{teacher_id}/slots", response_model=WeekSlotsRead)
async def get_week_slots(
    teacher_id: UUID,
    week_start: date = Query(description="Monday of the requested week"),
    duration_minutes: int = Query(default=30),
    service: SchedulingService = Depends(get_scheduling_service),
) -> WeekSlotsRead:
    """Resolve the weekly slot grid of a teacher."""
    slots, tz = await service.get_week_slots(teacher_id, week_start, duration_minutes)
    return WeekSlotsRead(
        teacher_id=teacher_id,
        week_start=week_start,
        duration_minutes=duration_minutes,
        timezone=tz.key,
        slots=[TimeSlotRead.from_slot(slot) for slot in slots],
    )


@router.get("/slots/remote", response_model=AvailableSlotsResponse)
async def list_remote_slots(
    date_from: date | None = Query(default=None, alias="from"),
    date_to: date | None = Query(default=None, alias="to"),
    teacher_id: UUID | None = Query(default=None),
    subject: str | None = Query(default=None, max_length=128),
    client: EdgeFunctionsClient = Depends(get_edge_functions_client),
) -> AvailableSlotsResponse:
    """Proxy the remote slot search."""
    return await search_remote_slots(client, date_from, date_to, teacher_id, subject)


@router.post(
    "/availability/recurring",
    response_model=RecurringAvailabilityRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_recurring_window(
    payload: RecurringAvailabilityCreate,
    service: SchedulingService = Depends(get_scheduling_service),
    current_user=Depends(get_current_user),
) -> RecurringAvailabilityRead:
    """Add weekly availability window."""
    window = await service.create_recurring(payload, current_user)
    return RecurringAvailabilityRead.model_validate(window)


@router.get("/teachers/{teacher_id}/availability/recurring", response_model=list[RecurringAvailabilityRead])
async def list_recurring_windows(
    teacher_id: UUID,
    service: SchedulingService = Depends(get_scheduling_service),
) -> list[RecurringAvailabilityRead]:
    """List weekly availability windows."""
    return [RecurringAvailabilityRead.model_validate(item) for item in await service.list_recurring(teacher_id)]


@router.delete("/availability/recurring/{window_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recurring_window(
    window_id: UUID,
    service: SchedulingService = Depends(get_scheduling_service),
    current_user=Depends(get_current_user),
) -> Response:
    await service.delete_recurring(window_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/availability/one-off",
    response_model=OneOffAvailabilityRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_one_off_window(
    payload: OneOffAvailabilityCreate,
    service: SchedulingService = Depends(get_scheduling_service),
    current_user=Depends(get_current_user),
) -> OneOffAvailabilityRead:
    """Add single-date availability window."""
    window = await service.create_one_off(payload, current_user)
    return OneOffAvailabilityRead.model_validate(window)


@router.get("/teachers/{teacher_id}/availability/one-off", response_model=list[OneOffAvailabilityRead])
async def list_one_off_windows(
    teacher_id: UUID,
    date_from: date | None = Query(default=None, alias="from"),
    service: SchedulingService = Depends(get_scheduling_service),
) -> list[OneOffAvailabilityRead]:
    """List single-date availability windows."""
    items = await service.list_one_off(teacher_id, date_from)
    return [OneOffAvailabilityRead.model_validate(item) for item in items]


@router.delete("/availability/one-off/{window_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_one_off_window(
    window_id: UUID,
    service: SchedulingService = Depends(get_scheduling_service),
    current_user=Depends(get_current_user),
) -> Response:
    await service.delete_one_off(window_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
