"""Task operations used by the API routers and the seed script.

Every write goes through ``prepare_task_write``, which validates the entity
and then applies the completion and timestamp bookkeeping.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from ..errors import NotFoundError, ValidationError
from ..database import store_operation
from ..models import Category, Priority, Task as TaskModel
from ..models.columns import as_utc, utcnow
from ..models.task import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH
from ..schemas.task import TaskCreate, TaskUpdate
from .pagination import Pagination
from .queries import build_task_filters

logger = logging.getLogger(__name__)

PRIORITIES = {p.value for p in Priority}
CATEGORIES = {c.value for c in Category}


def _get_update_data(task_update: TaskUpdate) -> dict:
    return task_update.model_dump(exclude_unset=True)


def validate_task(task: TaskModel, check_due_date: bool = False, now: Optional[datetime] = None) -> None:
    """Raise ValidationError if the task breaks a field rule.

    The due date is only checked when it is set to a new value, so an
    existing task does not become unsaveable once its due date passes.
    """
    if not isinstance(task.title, str) or not task.title.strip():
        raise ValidationError("Title is required")
    if len(task.title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title cannot be longer than {TITLE_MAX_LENGTH} characters")
    if len(task.description or "") > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(f"Description cannot be longer than {DESCRIPTION_MAX_LENGTH} characters")
    if task.priority not in PRIORITIES:
        raise ValidationError("Priority must be one of: low, medium, high")
    if task.category not in CATEGORIES:
        raise ValidationError("Category must be one of: work, personal, study, health, other")
    if not isinstance(task.completed, bool):
        raise ValidationError("Completed must be a boolean")
    if check_due_date and task.due_date is not None and as_utc(task.due_date) <= (now or utcnow()):
        raise ValidationError("Due date must be in the future")


def normalize_task(task: TaskModel, now: datetime) -> TaskModel:
    """Keep completed_at in step with completed and move updated_at forward."""
    if task.completed and task.completed_at is None:
        task.completed_at = now
    elif not task.completed:
        task.completed_at = None

    if task.updated_at is None or now > as_utc(task.updated_at):
        task.updated_at = now
    return task


def prepare_task_write(task: TaskModel, check_due_date: bool = False) -> TaskModel:
    now = utcnow()
    validate_task(task, check_due_date=check_due_date, now=now)
    return normalize_task(task, now)


def _save(db: Session, task: TaskModel, action: str) -> TaskModel:
    with store_operation(db, action):
        db.add(task)
        db.commit()
        db.refresh(task)
    return task


def list_tasks(
    db: Session,
    search: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    category: Optional[str] = None,
    pagination: Optional[Pagination] = None,
) -> dict:
    """Filtered page of tasks, newest first, plus paging metadata."""
    pagination = pagination or Pagination()
    filters = build_task_filters(search=search, status=status, priority=priority, category=category)

    with store_operation(db, "list tasks"):
        query = db.query(TaskModel).filter(*filters)
        total = query.count()
        tasks = (
            query.order_by(TaskModel.created_at.desc())
            .offset(pagination.skip)
            .limit(pagination.limit)
            .all()
        )

    return {"data": tasks, **pagination.describe(total)}


def search_tasks(
    db: Session,
    q: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    category: Optional[str] = None,
) -> List[TaskModel]:
    """All matching tasks, newest first, without paging."""
    filters = build_task_filters(search=q, status=status, priority=priority, category=category)
    with store_operation(db, "search tasks"):
        return db.query(TaskModel).filter(*filters).order_by(TaskModel.created_at.desc()).all()


def get_task(db: Session, task_id: str) -> TaskModel:
    with store_operation(db, "load task"):
        task = db.query(TaskModel).filter(TaskModel.id == task_id).first()
    if not task:
        raise NotFoundError("Task not found")
    return task


def create_task(db: Session, task: TaskCreate) -> TaskModel:
    db_task = TaskModel(
        title=task.title.strip() if task.title else "",
        description=task.description.strip() if task.description else "",
        priority=task.priority,
        category=task.category,
        due_date=as_utc(task.due_date),
        completed=task.completed,
    )
    prepare_task_write(db_task, check_due_date=True)
    _save(db, db_task, "create task")
    logger.info("Created task %s", db_task.id)
    return db_task


def update_task(db: Session, task_id: str, task_update: TaskUpdate) -> TaskModel:
    """Apply only the fields present in the request."""
    task = get_task(db, task_id)
    data = _get_update_data(task_update)

    if "title" in data:
        task.title = data["title"].strip() if data["title"] is not None else None
    if "description" in data:
        task.description = data["description"].strip() if data["description"] is not None else ""
    for field in ("priority", "category", "completed"):
        if field in data:
            setattr(task, field, data[field])
    due_date_changed = False
    if "due_date" in data:
        new_due_date = as_utc(data["due_date"])
        due_date_changed = new_due_date != as_utc(task.due_date)
        task.due_date = new_due_date

    try:
        prepare_task_write(task, check_due_date=due_date_changed)
    except ValidationError:
        db.rollback()
        raise
    _save(db, task, "update task")
    logger.info("Updated task %s fields=%s", task.id, sorted(data))
    return task


def update_priority(db: Session, task_id: str, priority: str) -> TaskModel:
    task = get_task(db, task_id)
    task.priority = priority
    try:
        prepare_task_write(task)
    except ValidationError:
        db.rollback()
        raise
    return _save(db, task, "update task priority")


def toggle_task(db: Session, task_id: str) -> TaskModel:
    task = get_task(db, task_id)
    task.completed = not task.completed
    prepare_task_write(task)
    _save(db, task, "toggle task")
    logger.info("Toggled task %s completed=%s", task.id, task.completed)
    return task


def delete_task(db: Session, task_id: str) -> None:
    task = get_task(db, task_id)
    with store_operation(db, "delete task"):
        db.delete(task)
        db.commit()
    logger.info("Deleted task %s", task_id)


def delete_completed_tasks(db: Session) -> int:
    """Remove every completed task and return how many were removed."""
    with store_operation(db, "delete completed tasks"):
        deleted = (
            db.query(TaskModel)
            .filter(TaskModel.completed.is_(True))
            .delete(synchronize_session=False)
        )
        db.commit()
    logger.info("Deleted %s completed tasks", deleted)
    return deleted
