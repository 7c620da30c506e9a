"""Admin reporting routes."""

from datetime import date

from fastapi import APIRouter, Depends, Query

from taskclock.core.clock import local_day_bounds
from taskclock.domain.user import User
from taskclock.interface.dependencies import get_services, require_admin
from taskclock.models.service_models import TimeReport
from taskclock.services.container import Services


router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/time")
async def get_time_report(
    from_date: date = Query(..., alias="from"),
    to_date: date = Query(..., alias="to"),
    _admin: User = Depends(require_admin),
    services: Services = Depends(get_services),
) -> TimeReport:
    """Per-user totals for entries started between the start of `from` and the end of `to`."""
    from_, _ = local_day_bounds(from_date, services.tz)
    _, to = local_day_bounds(to_date, services.tz)
    return await services.reports.get_time_totals_by_user(from_=from_, to=to)
