"""Translate optional filter parameters into SQL clauses.

The builders return a list of clauses meant to be passed to
``query.filter(*clauses)``; an empty list matches every row.
"""
from typing import List, Optional

from sqlalchemy import or_

from ..models import Project as ProjectModel, Task as TaskModel, TaskStatus

LIKE_ESCAPE = "\\"


def _escape_like(text: str) -> str:
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def contains(column, text: str):
    """Case-insensitive substring match, with LIKE wildcards taken literally."""
    return column.ilike(f"%{_escape_like(text)}%", escape=LIKE_ESCAPE)


def build_task_filters(
    search: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    category: Optional[str] = None,
) -> List:
    filters = []

    if search:
        filters.append(or_(contains(TaskModel.title, search), contains(TaskModel.description, search)))

    # Any other status value (e.g. "all") leaves completion unconstrained.
    if status == TaskStatus.COMPLETED.value:
        filters.append(TaskModel.completed.is_(True))
    elif status == TaskStatus.PENDING.value:
        filters.append(TaskModel.completed.is_(False))

    if priority:
        filters.append(TaskModel.priority == priority)
    if category:
        filters.append(TaskModel.category == category)

    return filters


def build_project_filters(search: Optional[str] = None) -> List:
    if not search:
        return []
    return [or_(contains(ProjectModel.name, search), contains(ProjectModel.description, search))]
