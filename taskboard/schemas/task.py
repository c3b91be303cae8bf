from datetime import datetime
from typing import List, Optional

from ..models.task import Category, Priority
from .common import CamelModel


class TaskCreate(CamelModel):
    """Schema for creating new tasks.

    `title` is optional here so an empty or missing title reaches the service
    layer and is reported as a validation error with a readable message.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    category: Category = Category.WORK
    due_date: Optional[datetime] = None
    completed: bool = False


class TaskUpdate(CamelModel):
    """Schema for updating existing tasks. Only fields sent are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    category: Optional[Category] = None
    due_date: Optional[datetime] = None
    completed: Optional[bool] = None


class TaskPriorityUpdate(CamelModel):
    priority: Priority


class Task(CamelModel):
    """Complete task schema with all fields, including computed ones."""
    id: str
    title: str
    description: str
    priority: str
    category: str
    due_date: Optional[datetime] = None
    completed: bool
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    is_overdue: bool
    priority_text: str
    category_text: str


class TaskSummary(CamelModel):
    """Reduced projection used by the recent-task listing."""
    id: str
    title: str
    completed: bool
    priority: str
    category: str
    due_date: Optional[datetime] = None
    created_at: datetime


class ProjectTaskSummary(TaskSummary):
    """Task as listed inside a project, with its description."""
    description: str


class TaskSearchResult(CamelModel):
    id: str
    title: str
    description: str
    priority: str
    category: str
    due_date: Optional[datetime] = None
    completed: bool
    created_at: datetime
    updated_at: datetime


class TaskPage(CamelModel):
    data: List[Task]
    total: int
    page: int
    limit: int
    pages: int


class TaskSearchResponse(CamelModel):
    data: List[TaskSearchResult]
    total: int


class TaskStats(CamelModel):
    total: int
    completed: int
    pending: int
    completion_rate: int


class TaskStatsResponse(CamelModel):
    stats: TaskStats
    recent_tasks: List[TaskSummary]
