from __future__ import annotations

from datetime import timedelta, timezone
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from taskboard.errors import NotFoundError, StoreError, ValidationError
from taskboard.models import Task
from taskboard.models.columns import utcnow
from taskboard.schemas.task import TaskCreate, TaskUpdate
from taskboard.services.tasks import (
    create_task,
    delete_completed_tasks,
    delete_task,
    get_task,
    search_tasks,
    toggle_task,
    update_priority,
    update_task,
)


def test_create_applies_defaults_and_trims(db):
    task = create_task(db, TaskCreate(title="  Write tests  ", description="  soon "))

    assert task.title == "Write tests"
    assert task.description == "soon"
    assert task.priority == "medium"
    assert task.category == "work"
    assert task.due_date is None
    assert task.completed is False
    assert task.completed_at is None
    assert task.is_overdue is False


@pytest.mark.parametrize("title", [None, "", "   "])
def test_create_requires_title(db, title):
    with pytest.raises(ValidationError, match="Title is required"):
        create_task(db, TaskCreate(title=title))
    assert db.query(Task).count() == 0


def test_create_rejects_long_title(db):
    with pytest.raises(ValidationError):
        create_task(db, TaskCreate(title="x" * 101))


def test_create_rejects_long_description(db):
    with pytest.raises(ValidationError):
        create_task(db, TaskCreate(title="ok", description="x" * 501))


def test_create_rejects_past_due_date(db):
    with pytest.raises(ValidationError, match="future"):
        create_task(db, TaskCreate(title="late", due_date=utcnow() - timedelta(hours=1)))


def test_create_converts_offset_due_date_to_utc(db):
    due = (utcnow() + timedelta(days=2)).astimezone(timezone(timedelta(hours=2)))

    task = create_task(db, TaskCreate(title="aware", due_date=due))

    assert task.due_date.utcoffset() == timedelta(0)
    assert task.due_date == due


def test_naive_due_date_is_taken_as_utc(db):
    due = utcnow() + timedelta(days=2)

    task = create_task(db, TaskCreate(title="naive", due_date=due.replace(tzinfo=None)))

    assert task.due_date == due


def test_timestamps_are_stored_and_loaded_as_utc(db):
    task = create_task(db, TaskCreate(title="stamped", due_date=utcnow() + timedelta(days=1)))
    db.expire_all()

    stored = get_task(db, task.id)

    for value in (stored.created_at, stored.updated_at, stored.due_date):
        assert value.tzinfo is not None
        assert value.utcoffset() == timedelta(0)


def test_create_completed_sets_completed_at(db):
    task = create_task(db, TaskCreate(title="done already", completed=True))

    assert task.completed_at is not None


def test_toggle_sets_completed_at_to_transition_time(db, make_task):
    task = make_task("toggle me", created_at=utcnow() - timedelta(days=3))
    before = utcnow()

    toggled = toggle_task(db, task.id)

    assert toggled.completed is True
    assert toggled.completed_at >= before
    assert toggled.completed_at > toggled.created_at


def test_toggle_back_clears_completed_at(db, make_task):
    task = make_task("done", completed=True)

    toggled = toggle_task(db, task.id)

    assert toggled.completed is False
    assert toggled.completed_at is None


def test_updated_at_never_moves_backwards(db, make_task):
    task = make_task("t")
    first = task.updated_at

    updated = update_task(db, task.id, TaskUpdate(description="more"))

    assert updated.updated_at >= first


def test_update_only_priority_leaves_other_fields(db, make_task):
    due = utcnow() + timedelta(days=4)
    task = make_task("keep", description="untouched", due_date=due)

    updated = update_task(db, task.id, TaskUpdate(priority="high"))

    assert updated.priority == "high"
    assert updated.title == "keep"
    assert updated.description == "untouched"
    assert updated.due_date == due


def test_update_does_not_recheck_unchanged_past_due_date(db, make_task):
    task = make_task("overdue", due_date=utcnow() - timedelta(days=1))
    assert task.is_overdue is True

    updated = update_task(db, task.id, TaskUpdate(title="still overdue"))

    assert updated.title == "still overdue"


def test_update_resending_unchanged_past_due_date_is_accepted(db, make_task):
    past = utcnow() - timedelta(days=1)
    task = make_task("overdue", due_date=past)

    updated = update_task(db, task.id, TaskUpdate(title="renamed", due_date=past, completed=True))

    assert updated.title == "renamed"
    assert updated.completed is True
    assert updated.due_date == past


def test_update_changing_to_another_past_due_date_is_rejected(db, make_task):
    task = make_task("overdue", due_date=utcnow() - timedelta(days=1))

    with pytest.raises(ValidationError, match="future"):
        update_task(db, task.id, TaskUpdate(due_date=utcnow() - timedelta(days=2)))


def test_update_with_explicit_null_due_date_clears_it(db, make_task):
    task = make_task("due", due_date=utcnow() + timedelta(days=1))

    updated = update_task(db, task.id, TaskUpdate(due_date=None))

    assert updated.due_date is None


def test_update_completed_flag_keeps_invariant(db, make_task):
    task = make_task("t")

    done = update_task(db, task.id, TaskUpdate(completed=True))
    assert done.completed_at is not None

    reopened = update_task(db, task.id, TaskUpdate(completed=False))
    assert reopened.completed_at is None


@pytest.mark.parametrize(
    "update",
    [
        TaskUpdate(title="  "),
        TaskUpdate(title=None),
        TaskUpdate(priority=None),
        TaskUpdate(completed=None),
    ],
)
def test_update_rejects_invalid_values_and_keeps_row(db, make_task, update):
    task = make_task("original")

    with pytest.raises(ValidationError):
        update_task(db, task.id, update)

    stored = get_task(db, task.id)
    assert stored.title == "original"
    assert stored.priority == "medium"


def test_update_missing_task(db):
    with pytest.raises(NotFoundError):
        update_task(db, "missing", TaskUpdate(title="x"))


def test_update_priority(db, make_task):
    task = make_task("t", priority="low")

    assert update_priority(db, task.id, "high").priority == "high"
    with pytest.raises(ValidationError):
        update_priority(db, task.id, "urgent")


def test_delete_task(db, make_task):
    task = make_task("bye")

    delete_task(db, task.id)

    with pytest.raises(NotFoundError):
        get_task(db, task.id)


def test_delete_missing_task_is_not_found(db):
    with pytest.raises(NotFoundError):
        delete_task(db, "does-not-exist")


def test_delete_completed_tasks(db, make_task):
    make_task("a", completed=True)
    make_task("b", completed=True)
    make_task("c")

    assert delete_completed_tasks(db) == 2
    assert [t.title for t in db.query(Task).all()] == ["c"]


def test_delete_completed_with_none_completed(db, make_task):
    make_task("open")

    assert delete_completed_tasks(db) == 0


def test_search_returns_all_matches_newest_first(db, make_task):
    make_task("alpha report")
    make_task("beta")
    make_task("gamma report", completed=True)

    assert [t.title for t in search_tasks(db, q="report")] == ["gamma report", "alpha report"]
    assert [t.title for t in search_tasks(db, q="report", status="pending")] == ["alpha report"]


def test_store_failure_is_reported_as_store_error(db):
    failure = OperationalError("INSERT INTO tasks", {}, Exception("disk I/O error"))

    with patch.object(db, "commit", side_effect=failure):
        with pytest.raises(StoreError) as excinfo:
            create_task(db, TaskCreate(title="unlucky"))

    assert excinfo.value.kind == "store_error"
    assert isinstance(excinfo.value.__cause__, OperationalError)
