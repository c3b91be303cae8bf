from datetime import datetime
from typing import List, Optional

from .common import CamelModel
from .task import ProjectTaskSummary


class ProjectCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    tasks: List[str] = []


class ProjectUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    tasks: Optional[List[str]] = None


class Project(CamelModel):
    """Project as stored: task references are plain ids."""
    id: str
    name: str
    description: str
    tasks: List[str]
    task_count: int
    created_at: datetime
    updated_at: datetime


class ProjectDetail(CamelModel):
    """Project with its task references resolved to task summaries."""
    id: str
    name: str
    description: str
    tasks: List[ProjectTaskSummary]
    task_count: int
    created_at: datetime
    updated_at: datetime


class ProjectList(CamelModel):
    data: List[ProjectDetail]
    total: int


class ProjectStats(CamelModel):
    total: int
    with_tasks: int
    empty: int
    total_task_references: int
    average_tasks_per_project: float
