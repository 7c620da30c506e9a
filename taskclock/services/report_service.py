"""Reporting over tracked time."""

import logging
from collections import defaultdict
from datetime import datetime

from taskclock.core.logging import span
from taskclock.domain.validators import validate_date_range
from taskclock.models.service_models import TimeReport, UserTimeTotal
from taskclock.repositories.base import TimeEntryRepository


logger = logging.getLogger(__name__)


class ReportService:
    def __init__(self, *, time_entries: TimeEntryRepository) -> None:
        self._time_entries = time_entries

    async def get_time_totals_by_user(self, *, from_: datetime, to: datetime) -> TimeReport:
        """Sum stopped time per user for entries started within [from_, to].

        Entries with a zero duration are ignored. Totals are sorted by user ID.

        Raises:
            ValidationError: If from_ is after to
        """
        with span("report_service.get_time_totals_by_user"):
            validate_date_range(from_, to)

            totals: dict[str, int] = defaultdict(int)
            for entry in await self._time_entries.list_completed_in_range(from_, to):
                if entry.duration_seconds and entry.duration_seconds > 0:
                    totals[entry.user_id] += entry.duration_seconds

            logger.info("Built time report for %d users", len(totals))
            return TimeReport(
                from_=from_.date(),
                to=to.date(),
                totals=[
                    UserTimeTotal(user_id=user_id, total_duration_seconds=total)
                    for user_id, total in sorted(totals.items())
                ],
            )
