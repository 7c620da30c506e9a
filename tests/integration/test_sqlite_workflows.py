"""End-to-end service workflows over SQLite storage."""

from datetime import UTC, datetime

import pytest

from taskclock.core.errors import ConflictError
from taskclock.domain.activity import ActivityType
from taskclock.domain.task import TaskStatus
from taskclock.domain.update_models import TaskPatch
from taskclock.domain.user import UserRole
from tests.unit.mocks import ADMIN_ID, MEMBER_ID, OTHER_MEMBER_ID


@pytest.mark.integration
async def test_track_time_and_report(sqlite_services, clock):
    clock.set(datetime.fromtimestamp(1000, UTC))
    task = await sqlite_services.tasks.create_task(
        creator_id=ADMIN_ID, title="Fix login", description="Users cannot log in", assignee_user_id=MEMBER_ID
    )

    entry = await sqlite_services.time_entries.start_time_entry(user_id=MEMBER_ID, task_id=task.id)
    with pytest.raises(ConflictError):
        await sqlite_services.time_entries.start_time_entry(user_id=MEMBER_ID, task_id=task.id)
    clock.set(datetime.fromtimestamp(1090, UTC))
    stopped = await sqlite_services.time_entries.stop_time_entry(user_id=MEMBER_ID, time_entry_id=entry.id)

    assert stopped.duration_seconds == 90
    report = await sqlite_services.reports.get_time_totals_by_user(
        from_=datetime.fromtimestamp(0, UTC), to=datetime.fromtimestamp(2000, UTC)
    )
    assert [(total.user_id, total.total_duration_seconds) for total in report.totals] == [(MEMBER_ID, 90)]

    activities = await sqlite_services.activities.list_activities(
        task_id=task.id, user_id=ADMIN_ID, role=UserRole.ADMIN
    )
    assert activities[0].message == "Stopped timer (1m 30s)"
    assert [activity.type for activity in activities] == [
        ActivityType.TIMER_STOPPED,
        ActivityType.TIMER_STARTED,
        ActivityType.TASK_ASSIGNED,
        ActivityType.TASK_CREATED,
    ]


@pytest.mark.integration
async def test_complete_stops_running_timer(sqlite_services, clock):
    task = await sqlite_services.tasks.create_task(
        creator_id=ADMIN_ID, title="t", description="d", assignee_user_id=MEMBER_ID
    )
    await sqlite_services.time_entries.start_time_entry(user_id=MEMBER_ID, task_id=task.id)
    clock.advance(minutes=2)

    completion = await sqlite_services.tasks.complete_task(task_id=task.id, member_id=MEMBER_ID)

    assert completion.task.status == TaskStatus.DONE
    assert completion.stopped_time_entry.duration_seconds == 120
    assert await sqlite_services.time_entries.get_active_time_entry(user_id=MEMBER_ID) is None
    summary = await sqlite_services.time_entries.get_today_summary(user_id=MEMBER_ID)
    assert summary.total_today_seconds == 120
    assert summary.completed_tasks_today_count == 1


@pytest.mark.integration
async def test_admin_update_and_member_listing(sqlite_services):
    task = await sqlite_services.tasks.create_task(creator_id=ADMIN_ID, title="t", description="d")

    updated = await sqlite_services.tasks.update_task_as_admin(
        task_id=task.id,
        patch=TaskPatch(assignee_user_id=OTHER_MEMBER_ID, tags=["ops", "urgent"]),
        actor_user_id=ADMIN_ID,
    )

    assert updated.tags == ("ops", "urgent")
    assert await sqlite_services.tasks.list_tasks_for_member(member_id=MEMBER_ID) == []
    assert [t.id for t in await sqlite_services.tasks.list_tasks_for_member(member_id=OTHER_MEMBER_ID)] == [task.id]


@pytest.mark.integration
async def test_users_roles_and_streaks(sqlite_services):
    user = await sqlite_services.users.ensure_user(user_id="new-user", email="new@example.com")
    await sqlite_services.users.update_user_role(actor_user_id=ADMIN_ID, user_id=user.id, role=UserRole.ADMIN)

    assert (await sqlite_services.users.get_user(user_id=user.id)).role == UserRole.ADMIN
    assert await sqlite_services.users.increment_streak(user_id=user.id) == 1
