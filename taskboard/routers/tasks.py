from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..config import DEFAULT_PAGE_LIMIT, RECENT_TASKS_LIMIT
from ..database import get_db
from ..schemas.common import BulkDeleteResult, DeleteResult
from ..schemas.task import (
    Task as TaskSchema,
    TaskCreate,
    TaskPage,
    TaskPriorityUpdate,
    TaskSearchResponse,
    TaskSearchResult,
    TaskStats,
    TaskStatsResponse,
    TaskSummary,
    TaskUpdate,
)
from ..services import stats as stats_service
from ..services import tasks as task_service
from ..services.pagination import Pagination

router = APIRouter()


# Static paths first so they are not captured by /tasks/{task_id}.

@router.get("/tasks", response_model=TaskPage)
def get_tasks(
    search: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    category: Optional[str] = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_LIMIT,
    db: Session = Depends(get_db),
):
    """List tasks with text search, filters and pagination (newest first)."""
    result = task_service.list_tasks(
        db,
        search=search,
        status=status,
        priority=priority,
        category=category,
        pagination=Pagination(page=page, limit=limit),
    )
    result["data"] = [TaskSchema.model_validate(task) for task in result["data"]]
    return TaskPage(**result)


@router.post("/tasks", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
def create_task(task: TaskCreate, db: Session = Depends(get_db)):
    """Create a new task."""
    return TaskSchema.model_validate(task_service.create_task(db, task))


@router.get("/tasks/stats", response_model=TaskStatsResponse)
def get_task_stats(db: Session = Depends(get_db)):
    """Completion stats over all tasks plus the most recent ones."""
    stats = stats_service.get_task_stats(db)
    recent = stats_service.get_recent_tasks(db, RECENT_TASKS_LIMIT)
    return TaskStatsResponse(
        stats=TaskStats(**stats),
        recent_tasks=[TaskSummary.model_validate(task) for task in recent],
    )


@router.get("/tasks/search", response_model=TaskSearchResponse)
def search_tasks(
    q: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    category: Optional[str] = None,
    db: Session = Depends(get_db),
):
    tasks = task_service.search_tasks(db, q=q, status=status, priority=priority, category=category)
    return TaskSearchResponse(
        data=[TaskSearchResult.model_validate(task) for task in tasks],
        total=len(tasks),
    )


@router.delete("/tasks/completed", response_model=BulkDeleteResult)
def delete_completed_tasks(db: Session = Depends(get_db)):
    """Remove all completed tasks."""
    deleted = task_service.delete_completed_tasks(db)
    return BulkDeleteResult(
        message=f"{deleted} completed tasks removed",
        deleted_count=deleted,
    )


@router.get("/tasks/{task_id}", response_model=TaskSchema)
def get_task(task_id: str, db: Session = Depends(get_db)):
    return TaskSchema.model_validate(task_service.get_task(db, task_id))


@router.put("/tasks/{task_id}", response_model=TaskSchema)
def update_task(task_id: str, task_update: TaskUpdate, db: Session = Depends(get_db)):
    """Update a task. Fields missing from the body are left unchanged."""
    return TaskSchema.model_validate(task_service.update_task(db, task_id, task_update))


@router.delete("/tasks/{task_id}", response_model=DeleteResult)
def delete_task(task_id: str, db: Session = Depends(get_db)):
    task_service.delete_task(db, task_id)
    return DeleteResult(message=f"Task {task_id} deleted")


@router.patch("/tasks/{task_id}/toggle", response_model=TaskSchema)
def toggle_task(task_id: str, db: Session = Depends(get_db)):
    """Flip the completion status of a task."""
    return TaskSchema.model_validate(task_service.toggle_task(db, task_id))


@router.patch("/tasks/{task_id}/priority", response_model=TaskSchema)
def update_task_priority(task_id: str, payload: TaskPriorityUpdate, db: Session = Depends(get_db)):
    return TaskSchema.model_validate(task_service.update_priority(db, task_id, payload.priority))
