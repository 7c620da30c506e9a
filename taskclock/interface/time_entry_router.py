"""Timer routes for members."""

from fastapi import APIRouter, Depends, HTTPException, status

from taskclock.domain.create_models import TimeEntryStart, TimeEntryStop
from taskclock.domain.time_entry import TimeEntry
from taskclock.domain.user import User
from taskclock.interface.dependencies import get_services, require_member
from taskclock.models.service_models import TodaySummary
from taskclock.services.container import Services


router = APIRouter(prefix="/api/time-entries", tags=["time-entries"])


@router.post("/start", status_code=status.HTTP_201_CREATED)
async def start_time_entry(
    payload: TimeEntryStart,
    member: User = Depends(require_member),
    services: Services = Depends(get_services),
) -> TimeEntry:
    return await services.time_entries.start_time_entry(user_id=member.id, task_id=payload.task_id)


@router.post("/stop")
async def stop_time_entry(
    payload: TimeEntryStop,
    member: User = Depends(require_member),
    services: Services = Depends(get_services),
) -> TimeEntry:
    entry = await services.time_entries.stop_time_entry(user_id=member.id, time_entry_id=payload.time_entry_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time entry not found")
    return entry


@router.get("/active")
async def get_active_time_entry(
    member: User = Depends(require_member),
    services: Services = Depends(get_services),
) -> TimeEntry | None:
    return await services.time_entries.get_active_time_entry(user_id=member.id)


@router.get("/summary/today")
async def get_today_summary(
    member: User = Depends(require_member),
    services: Services = Depends(get_services),
) -> TodaySummary:
    return await services.time_entries.get_today_summary(user_id=member.id)
