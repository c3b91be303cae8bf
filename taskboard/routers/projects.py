from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.common import DeleteResult
from ..schemas.project import (
    Project as ProjectSchema,
    ProjectCreate,
    ProjectDetail,
    ProjectList,
    ProjectStats,
    ProjectUpdate,
)
from ..services import projects as project_service
from ..services import stats as stats_service

router = APIRouter()


@router.get("/projects", response_model=ProjectList)
def get_projects(search: Optional[str] = None, db: Session = Depends(get_db)):
    """List projects (newest first) with their tasks resolved."""
    projects = project_service.list_projects(db, search=search)
    return ProjectList(data=projects, total=len(projects))


@router.post("/projects", response_model=ProjectSchema, status_code=status.HTTP_201_CREATED)
def create_project(project: ProjectCreate, db: Session = Depends(get_db)):
    return ProjectSchema.model_validate(project_service.create_project(db, project))


@router.get("/projects/stats", response_model=ProjectStats)
def get_project_stats(db: Session = Depends(get_db)):
    return ProjectStats(**stats_service.get_project_stats(db))


@router.get("/projects/{project_id}", response_model=ProjectDetail)
def get_project(project_id: str, db: Session = Depends(get_db)):
    return project_service.get_project_detail(db, project_id)


@router.put("/projects/{project_id}", response_model=ProjectSchema)
def update_project(project_id: str, project_update: ProjectUpdate, db: Session = Depends(get_db)):
    """Update a project. Fields missing from the body are left unchanged."""
    return ProjectSchema.model_validate(project_service.update_project(db, project_id, project_update))


@router.delete("/projects/{project_id}", response_model=DeleteResult)
def delete_project(project_id: str, db: Session = Depends(get_db)):
    """Delete a project. Its tasks are not deleted."""
    project_service.delete_project(db, project_id)
    return DeleteResult(message=f"Project {project_id} deleted")


@router.post("/projects/{project_id}/tasks/{task_id}", response_model=ProjectSchema)
def add_project_task(project_id: str, task_id: str, db: Session = Depends(get_db)):
    return ProjectSchema.model_validate(project_service.add_task_reference(db, project_id, task_id))


@router.delete("/projects/{project_id}/tasks/{task_id}", response_model=ProjectSchema)
def remove_project_task(project_id: str, task_id: str, db: Session = Depends(get_db)):
    return ProjectSchema.model_validate(project_service.remove_task_reference(db, project_id, task_id))


@router.delete("/projects/{project_id}/tasks", response_model=ProjectSchema)
def clear_project_tasks(project_id: str, db: Session = Depends(get_db)):
    return ProjectSchema.model_validate(project_service.clear_task_references(db, project_id))
