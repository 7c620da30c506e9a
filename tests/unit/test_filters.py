"""Unit tests for task filtering and ordering."""

from datetime import UTC, date, datetime, timedelta

import pytest

from taskclock.domain.filters import TaskFilters, apply_task_filters
from taskclock.domain.task import Priority, Task, TaskStatus


BASE = datetime(2025, 1, 10, tzinfo=UTC)


def _task(task_id: str, **overrides) -> Task:
    data = {
        "id": task_id,
        "title": f"Task {task_id}",
        "description": "",
        "created_by_admin_id": "admin-1",
        "created_at": BASE,
        "updated_at": BASE,
    }
    return Task(**{**data, **overrides})


@pytest.fixture
def tasks() -> list[Task]:
    return [
        _task("a", title="Fix Login bug", priority=Priority.HIGH, due_date=date(2025, 2, 1), tags=("bug",)),
        _task("b", description="update the LOGIN page copy", status=TaskStatus.DONE, created_at=BASE + timedelta(1)),
        _task("c", assignee_user_id="m-1", tags=("ops", "bug"), created_at=BASE + timedelta(2)),
        _task("d", assignee_user_id="m-1", due_date=date(2025, 1, 20), created_at=BASE - timedelta(1)),
    ]


def _ids(tasks: list[Task]) -> list[str]:
    return [task.id for task in tasks]


@pytest.mark.unit
class TestTaskFilters:
    def test_empty_filters(self):
        assert TaskFilters().is_empty()
        assert not TaskFilters(tag="x").is_empty()

    def test_no_filters_keeps_input_order(self, tasks):
        assert _ids(apply_task_filters(tasks, TaskFilters())) == ["a", "b", "c", "d"]

    def test_equality_filters(self, tasks):
        assert _ids(apply_task_filters(tasks, TaskFilters(status=TaskStatus.DONE))) == ["b"]
        assert _ids(apply_task_filters(tasks, TaskFilters(priority=Priority.HIGH))) == ["a"]
        assert _ids(apply_task_filters(tasks, TaskFilters(assignee_user_id="m-1"))) == ["c", "d"]

    def test_tag_membership(self, tasks):
        assert _ids(apply_task_filters(tasks, TaskFilters(tag="bug"))) == ["a", "c"]

    def test_search_is_case_insensitive_over_title_or_description(self, tasks):
        assert _ids(apply_task_filters(tasks, TaskFilters(search_query="login"))) == ["a", "b"]

    def test_sort_by_created_at(self, tasks):
        result = apply_task_filters(tasks, TaskFilters(sort_by="created_at"))
        assert _ids(result) == ["d", "a", "b", "c"]

    def test_sort_by_created_at_desc(self, tasks):
        result = apply_task_filters(tasks, TaskFilters(sort_by="created_at", sort_order="desc"))
        assert _ids(result) == ["c", "b", "a", "d"]

    def test_missing_due_date_sorts_first(self, tasks):
        result = apply_task_filters(tasks, TaskFilters(sort_by="due_date"))
        assert _ids(result) == ["b", "c", "d", "a"]

    def test_sort_order_alone_does_not_sort(self, tasks):
        assert _ids(apply_task_filters(tasks, TaskFilters(sort_order="desc"))) == ["a", "b", "c", "d"]

    def test_for_assignee_overrides_caller_value(self):
        filters = TaskFilters(assignee_user_id="someone-else", tag="x").for_assignee("m-1")
        assert filters.assignee_user_id == "m-1"
        assert filters.tag == "x"
