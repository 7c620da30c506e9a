"""Unit tests for the task service."""

from dataclasses import replace
from datetime import UTC, date

import pytest

from taskclock.core.errors import ForbiddenError, NotFoundError, ValidationError
from taskclock.domain.activity import ActivityType
from taskclock.domain.filters import TaskFilters
from taskclock.domain.task import Priority, TaskStatus
from taskclock.domain.update_models import TaskPatch
from taskclock.domain.user import UserRole
from taskclock.repositories import memory_repositories
from taskclock.services.container import build_services
from tests.unit.mocks import (
    ADMIN_ID,
    MEMBER_ID,
    OTHER_MEMBER_ID,
    FailingActivityRepository,
    activity_messages,
    activity_types,
)


@pytest.mark.unit
class TestCreateTask:
    async def test_create_with_assignee_records_created_and_assigned(self, services):
        task = await services.tasks.create_task(
            creator_id=ADMIN_ID,
            title="Ship release",
            description="Cut the tag",
            assignee_user_id=MEMBER_ID,
            priority=Priority.HIGH,
            due_date=date(2025, 2, 1),
            tags=["release", "ops"],
        )

        assert task.status == TaskStatus.TODO
        assert task.created_by_admin_id == ADMIN_ID
        assert task.tags == ("release", "ops")
        assert await activity_types(services, task.id) == [ActivityType.TASK_CREATED, ActivityType.TASK_ASSIGNED]
        assert await activity_messages(services, task.id) == [
            'Task "Ship release" created',
            f"Assigned to user {MEMBER_ID}",
        ]

    async def test_create_unassigned_records_only_created(self, services):
        task = await services.tasks.create_task(creator_id=ADMIN_ID, title="Backlog", description="Later")

        assert task.assignee_user_id is None
        assert task.priority == Priority.MEDIUM
        assert await activity_types(services, task.id) == [ActivityType.TASK_CREATED]

    @pytest.mark.parametrize(
        ("title", "description"),
        [("", "ok"), ("   ", "ok"), ("ok", ""), ("t" * 201, "ok"), ("ok", "d" * 2001)],
    )
    async def test_invalid_text_rejected(self, services, repositories, title, description):
        with pytest.raises(ValidationError):
            await services.tasks.create_task(creator_id=ADMIN_ID, title=title, description=description)

        assert await repositories.tasks.list_all() == []

    async def test_empty_tag_rejected(self, services):
        with pytest.raises(ValidationError):
            await services.tasks.create_task(creator_id=ADMIN_ID, title="t", description="d", tags=["ok", ""])

    async def test_member_creates_task_for_themselves(self, services):
        task = await services.tasks.create_task_as_member(member_id=MEMBER_ID, title="My todo", description="Mine")

        assert task.created_by_admin_id == "self"
        assert task.assignee_user_id == MEMBER_ID
        assert task.priority == Priority.MEDIUM
        assert task.due_date is None
        assert task.tags == ()


@pytest.mark.unit
class TestUpdateTaskAsAdmin:
    async def test_unknown_task_returns_none(self, services):
        result = await services.tasks.update_task_as_admin(
            task_id="missing", patch=TaskPatch(status=TaskStatus.DONE), actor_user_id=ADMIN_ID
        )

        assert result is None

    async def test_only_provided_fields_change(self, services, assigned_task, clock):
        clock.advance(minutes=5)

        updated = await services.tasks.update_task_as_admin(
            task_id=assigned_task.id, patch=TaskPatch(priority=Priority.LOW), actor_user_id=ADMIN_ID
        )

        assert updated.priority == Priority.LOW
        assert updated.title == assigned_task.title
        assert updated.assignee_user_id == MEMBER_ID
        assert updated.updated_at == clock.now()

    async def test_one_activity_per_changed_field(self, services, assigned_task):
        patch = TaskPatch(
            status=TaskStatus.IN_PROGRESS,
            priority=Priority.HIGH,
            due_date=date(2025, 3, 1),
            tags=["a"],
            title="Renamed",
        )

        await services.tasks.update_task_as_admin(task_id=assigned_task.id, patch=patch, actor_user_id=ADMIN_ID)

        messages = await activity_messages(services, assigned_task.id)
        assert messages[2:] == [
            "Status changed to IN_PROGRESS",
            "Priority changed to HIGH",
            "Due date set to 2025-03-01",
            "Tags updated",
        ]

    async def test_unchanged_values_record_nothing(self, services, assigned_task):
        patch = TaskPatch(status=TaskStatus.TODO, priority=Priority.MEDIUM, assignee_user_id=MEMBER_ID)

        await services.tasks.update_task_as_admin(task_id=assigned_task.id, patch=patch, actor_user_id=ADMIN_ID)

        assert len(await activity_types(services, assigned_task.id)) == 2

    async def test_title_only_change_records_nothing(self, services, assigned_task):
        updated = await services.tasks.update_task_as_admin(
            task_id=assigned_task.id, patch=TaskPatch(title="New title"), actor_user_id=ADMIN_ID
        )

        assert updated.title == "New title"
        assert len(await activity_types(services, assigned_task.id)) == 2

    async def test_reordered_tags_count_as_change(self, services):
        task = await services.tasks.create_task(creator_id=ADMIN_ID, title="t", description="d", tags=["x", "y"])

        await services.tasks.update_task_as_admin(
            task_id=task.id, patch=TaskPatch(tags=["y", "x"]), actor_user_id=ADMIN_ID
        )

        assert (await activity_types(services, task.id))[-1] == ActivityType.TASK_TAGS_CHANGED

    async def test_explicit_null_clears_assignee_and_due_date(self, services):
        task = await services.tasks.create_task(
            creator_id=ADMIN_ID, title="t", description="d", assignee_user_id=MEMBER_ID, due_date=date(2025, 2, 1)
        )

        updated = await services.tasks.update_task_as_admin(
            task_id=task.id,
            patch=TaskPatch.model_validate({"assignee_user_id": None, "due_date": None}),
            actor_user_id=ADMIN_ID,
        )

        assert updated.assignee_user_id is None
        assert updated.due_date is None
        assert (await activity_messages(services, task.id))[-2:] == ["Unassigned", "Due date set to None"]

    async def test_blank_assignee_stored_as_unassigned(self, services, repositories, assigned_task):
        updated = await services.tasks.update_task_as_admin(
            task_id=assigned_task.id, patch=TaskPatch(assignee_user_id=""), actor_user_id=ADMIN_ID
        )

        assert updated.assignee_user_id is None
        assert (await repositories.tasks.find_by_id(assigned_task.id)).assignee_user_id is None
        assert await services.tasks.list_tasks_for_member(member_id=MEMBER_ID) == []
        assert (await activity_messages(services, assigned_task.id))[-1] == "Unassigned"

    async def test_explicit_null_status_rejected(self, services, assigned_task):
        with pytest.raises(ValidationError):
            await services.tasks.update_task_as_admin(
                task_id=assigned_task.id, patch=TaskPatch.model_validate({"status": None}), actor_user_id=ADMIN_ID
            )

    async def test_blank_title_rejected(self, services, assigned_task):
        with pytest.raises(ValidationError):
            await services.tasks.update_task_as_admin(
                task_id=assigned_task.id, patch=TaskPatch(title="  "), actor_user_id=ADMIN_ID
            )


@pytest.mark.unit
class TestAssignTask:
    async def test_assign_always_records(self, services, assigned_task):
        updated = await services.tasks.assign_task(
            task_id=assigned_task.id, assignee_user_id=MEMBER_ID, actor_user_id=ADMIN_ID
        )

        assert updated.assignee_user_id == MEMBER_ID
        assert await activity_types(services, assigned_task.id) == [
            ActivityType.TASK_CREATED,
            ActivityType.TASK_ASSIGNED,
            ActivityType.TASK_ASSIGNED,
        ]

    async def test_unassign(self, services, assigned_task):
        updated = await services.tasks.assign_task(
            task_id=assigned_task.id, assignee_user_id=None, actor_user_id=ADMIN_ID
        )

        assert updated.assignee_user_id is None
        assert (await activity_messages(services, assigned_task.id))[-1] == "Unassigned"

    async def test_unknown_task_returns_none(self, services):
        result = await services.tasks.assign_task(task_id="nope", assignee_user_id=MEMBER_ID, actor_user_id=ADMIN_ID)

        assert result is None


@pytest.mark.unit
class TestMemberStatusUpdate:
    async def test_assignee_can_change_status(self, services, assigned_task):
        updated = await services.tasks.update_task_status_as_member(
            task_id=assigned_task.id, member_id=MEMBER_ID, status=TaskStatus.IN_PROGRESS
        )

        assert updated.status == TaskStatus.IN_PROGRESS
        assert (await activity_messages(services, assigned_task.id))[-1] == "Status changed to IN_PROGRESS"

    async def test_other_member_forbidden(self, services, assigned_task, repositories):
        with pytest.raises(ForbiddenError):
            await services.tasks.update_task_status_as_member(
                task_id=assigned_task.id, member_id=OTHER_MEMBER_ID, status=TaskStatus.DONE
            )

        assert (await repositories.tasks.find_by_id(assigned_task.id)).status == TaskStatus.TODO

    async def test_unassigned_task_forbidden(self, services):
        task = await services.tasks.create_task(creator_id=ADMIN_ID, title="t", description="d")

        with pytest.raises(ForbiddenError):
            await services.tasks.update_task_status_as_member(
                task_id=task.id, member_id=MEMBER_ID, status=TaskStatus.DONE
            )

    async def test_unknown_task_returns_none(self, services):
        result = await services.tasks.update_task_status_as_member(
            task_id="nope", member_id=MEMBER_ID, status=TaskStatus.DONE
        )

        assert result is None


@pytest.mark.unit
class TestCompleteTask:
    async def test_complete_stops_timer_on_same_task(self, services, assigned_task, clock):
        entry = await services.time_entries.start_time_entry(user_id=MEMBER_ID, task_id=assigned_task.id)
        clock.advance(seconds=75)

        completion = await services.tasks.complete_task(task_id=assigned_task.id, member_id=MEMBER_ID)

        assert completion.task.status == TaskStatus.DONE
        assert completion.stopped_time_entry.id == entry.id
        assert completion.stopped_time_entry.duration_seconds == 75
        assert await services.time_entries.get_active_time_entry(user_id=MEMBER_ID) is None
        messages = await activity_messages(services, assigned_task.id)
        assert messages[-2:] == ["Stopped timer (1m 15s)", "Task completed"]

    async def test_timer_on_other_task_keeps_running(self, services, assigned_task, clock):
        other = await services.tasks.create_task(
            creator_id=ADMIN_ID, title="Other", description="d", assignee_user_id=MEMBER_ID
        )
        running = await services.time_entries.start_time_entry(user_id=MEMBER_ID, task_id=other.id)
        clock.advance(seconds=10)

        completion = await services.tasks.complete_task(task_id=assigned_task.id, member_id=MEMBER_ID)

        assert completion.stopped_time_entry is None
        assert (await services.time_entries.get_active_time_entry(user_id=MEMBER_ID)).id == running.id

    async def test_missing_task(self, services):
        with pytest.raises(NotFoundError):
            await services.tasks.complete_task(task_id="nope", member_id=MEMBER_ID)

    async def test_not_assignee(self, services, assigned_task):
        with pytest.raises(ForbiddenError):
            await services.tasks.complete_task(task_id=assigned_task.id, member_id=OTHER_MEMBER_ID)


@pytest.mark.unit
class TestGetAndListTasks:
    async def test_get_task_gate(self, services, assigned_task):
        assert (await services.tasks.get_task(task_id=assigned_task.id, user_id=ADMIN_ID, role=UserRole.ADMIN)).id
        assert await services.tasks.get_task(task_id=assigned_task.id, user_id=MEMBER_ID, role=UserRole.MEMBER)
        with pytest.raises(ForbiddenError):
            await services.tasks.get_task(task_id=assigned_task.id, user_id=OTHER_MEMBER_ID, role=UserRole.MEMBER)
        with pytest.raises(NotFoundError):
            await services.tasks.get_task(task_id="nope", user_id=ADMIN_ID, role=UserRole.ADMIN)

    async def test_admin_sees_everything(self, services, assigned_task):
        await services.tasks.create_task(creator_id=ADMIN_ID, title="Unassigned", description="d")

        assert len(await services.tasks.list_tasks_for_admin()) == 2
        assert len(await services.tasks.list_tasks_for_admin(filters=TaskFilters(assignee_user_id=MEMBER_ID))) == 1

    async def test_member_only_sees_assigned_tasks(self, services, assigned_task):
        await services.tasks.create_task(
            creator_id=ADMIN_ID, title="Other's", description="d", assignee_user_id=OTHER_MEMBER_ID
        )

        assert [task.id for task in await services.tasks.list_tasks_for_member(member_id=MEMBER_ID)] == [
            assigned_task.id
        ]

    async def test_member_cannot_widen_with_assignee_filter(self, services, assigned_task):
        await services.tasks.create_task(
            creator_id=ADMIN_ID, title="Other's", description="d", assignee_user_id=OTHER_MEMBER_ID
        )

        result = await services.tasks.list_tasks_for_member(
            member_id=MEMBER_ID, filters=TaskFilters(assignee_user_id=OTHER_MEMBER_ID)
        )

        assert [task.id for task in result] == [assigned_task.id]

    async def test_member_search_and_sort(self, services, clock):
        first = await services.tasks.create_task(
            creator_id=ADMIN_ID, title="Write docs", description="d", assignee_user_id=MEMBER_ID
        )
        clock.advance(minutes=1)
        second = await services.tasks.create_task(
            creator_id=ADMIN_ID, title="Review", description="the DOCS", assignee_user_id=MEMBER_ID
        )

        result = await services.tasks.list_tasks_for_member(
            member_id=MEMBER_ID, filters=TaskFilters(search_query="docs", sort_by="created_at", sort_order="desc")
        )

        assert [task.id for task in result] == [second.id, first.id]


@pytest.mark.unit
class TestActivityFailures:
    """Activity writes are best-effort and never undo the change that caused them."""

    async def test_create_succeeds_when_activity_store_fails(self, clock):
        failing = FailingActivityRepository()
        repositories = replace(memory_repositories(), activities=failing)
        services = build_services(repositories, clock=clock, tz=UTC)

        task = await services.tasks.create_task(
            creator_id=ADMIN_ID, title="t", description="d", assignee_user_id=MEMBER_ID
        )

        assert await repositories.tasks.find_by_id(task.id) == task
        assert failing.attempts == 2

    async def test_later_effects_still_recorded(self, clock):
        failing = FailingActivityRepository(failing_types={ActivityType.TASK_CREATED})
        repositories = replace(memory_repositories(), activities=failing)
        services = build_services(repositories, clock=clock, tz=UTC)

        task = await services.tasks.create_task(
            creator_id=ADMIN_ID, title="t", description="d", assignee_user_id=MEMBER_ID
        )

        assert await activity_types(services, task.id) == [ActivityType.TASK_ASSIGNED]
