import math
from typing import List

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from ..config import RECENT_TASKS_LIMIT
from ..database import store_operation
from ..models import Project as ProjectModel, Task as TaskModel


def completion_rate(completed: int, total: int) -> int:
    """Percentage of completed tasks, rounded half up."""
    if total <= 0:
        return 0
    return math.floor(completed * 100 / total + 0.5)


def get_task_stats(db: Session) -> dict:
    """Count total, completed and pending tasks in a single aggregate query."""
    completed_sum = func.coalesce(func.sum(case((TaskModel.completed.is_(True), 1), else_=0)), 0)
    with store_operation(db, "compute task stats"):
        total, completed = db.query(func.count(TaskModel.id), completed_sum).one()

    total = int(total or 0)
    completed = int(completed or 0)
    return {
        "total": total,
        "completed": completed,
        "pending": total - completed,
        "completion_rate": completion_rate(completed, total),
    }


def get_recent_tasks(db: Session, limit: int = RECENT_TASKS_LIMIT) -> List[TaskModel]:
    with store_operation(db, "load recent tasks"):
        return (
            db.query(TaskModel)
            .order_by(TaskModel.created_at.desc())
            .limit(limit)
            .all()
        )


def get_project_stats(db: Session) -> dict:
    """Reference counts over every project.

    Task lists live in a JSON column, so the sizes are summed here rather than
    in SQL.
    """
    with store_operation(db, "compute project stats"):
        rows = db.query(ProjectModel.tasks).all()

    sizes = [len(row[0] or []) for row in rows]
    total = len(sizes)
    with_tasks = sum(1 for size in sizes if size > 0)
    references = sum(sizes)
    return {
        "total": total,
        "with_tasks": with_tasks,
        "empty": total - with_tasks,
        "total_task_references": references,
        "average_tasks_per_project": round(references / total, 2) if total else 0.0,
    }
