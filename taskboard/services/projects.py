import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from ..errors import NotFoundError, ValidationError
from ..database import store_operation
from ..models import Project as ProjectModel, Task as TaskModel
from ..models.project import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH
from ..models.columns import as_utc, utcnow
from ..schemas.project import ProjectCreate, ProjectDetail, ProjectUpdate
from ..schemas.task import ProjectTaskSummary
from .queries import build_project_filters

logger = logging.getLogger(__name__)


def unique_task_ids(task_ids: Iterable[str]) -> List[str]:
    """Drop repeated ids, keeping the first occurrence order."""
    seen = set()
    result = []
    for task_id in task_ids:
        if task_id not in seen:
            seen.add(task_id)
            result.append(task_id)
    return result


def validate_project(project: ProjectModel) -> None:
    if not isinstance(project.name, str) or not project.name.strip():
        raise ValidationError("Project name is required")
    if len(project.name) > NAME_MAX_LENGTH:
        raise ValidationError(f"Project name cannot be longer than {NAME_MAX_LENGTH} characters")
    if len(project.description or "") > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(f"Description cannot be longer than {DESCRIPTION_MAX_LENGTH} characters")


def prepare_project_write(project: ProjectModel) -> ProjectModel:
    validate_project(project)
    now = utcnow()
    if project.updated_at is None or now > as_utc(project.updated_at):
        project.updated_at = now
    return project


def _save(db: Session, project: ProjectModel, action: str) -> ProjectModel:
    prepare_project_write(project)
    with store_operation(db, action):
        db.add(project)
        db.commit()
        db.refresh(project)
    return project


def _load_tasks(db: Session, task_ids: Iterable[str]) -> Dict[str, TaskModel]:
    ids = set(task_ids)
    if not ids:
        return {}
    with store_operation(db, "load project tasks"):
        tasks = db.query(TaskModel).filter(TaskModel.id.in_(ids)).all()
    return {task.id: task for task in tasks}


def to_detail(project: ProjectModel, tasks_by_id: Dict[str, TaskModel]) -> ProjectDetail:
    """Resolve task references; ids without a stored task are skipped."""
    return ProjectDetail(
        id=project.id,
        name=project.name,
        description=project.description,
        tasks=[
            ProjectTaskSummary.model_validate(tasks_by_id[task_id])
            for task_id in project.tasks
            if task_id in tasks_by_id
        ],
        task_count=project.task_count,
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


def list_projects(db: Session, search: Optional[str] = None) -> List[ProjectDetail]:
    with store_operation(db, "list projects"):
        projects = (
            db.query(ProjectModel)
            .filter(*build_project_filters(search))
            .order_by(ProjectModel.created_at.desc())
            .all()
        )
    tasks_by_id = _load_tasks(db, (task_id for project in projects for task_id in project.tasks))
    return [to_detail(project, tasks_by_id) for project in projects]


def get_project(db: Session, project_id: str) -> ProjectModel:
    with store_operation(db, "load project"):
        project = db.query(ProjectModel).filter(ProjectModel.id == project_id).first()
    if not project:
        raise NotFoundError("Project not found")
    return project


def get_project_detail(db: Session, project_id: str) -> ProjectDetail:
    project = get_project(db, project_id)
    return to_detail(project, _load_tasks(db, project.tasks))


def create_project(db: Session, project: ProjectCreate) -> ProjectModel:
    db_project = ProjectModel(
        name=project.name.strip() if project.name else "",
        description=project.description.strip() if project.description else "",
        tasks=unique_task_ids(project.tasks),
    )
    _save(db, db_project, "create project")
    logger.info("Created project %s", db_project.id)
    return db_project


def update_project(db: Session, project_id: str, project_update: ProjectUpdate) -> ProjectModel:
    project = get_project(db, project_id)
    data = project_update.model_dump(exclude_unset=True)

    if "name" in data:
        project.name = data["name"].strip() if data["name"] is not None else None
    if "description" in data:
        project.description = data["description"].strip() if data["description"] is not None else ""
    if "tasks" in data:
        project.tasks = unique_task_ids(data["tasks"] or [])

    try:
        _save(db, project, "update project")
    except ValidationError:
        db.rollback()
        raise
    logger.info("Updated project %s fields=%s", project.id, sorted(data))
    return project


def delete_project(db: Session, project_id: str) -> None:
    """Delete the project only; referenced tasks stay."""
    project = get_project(db, project_id)
    with store_operation(db, "delete project"):
        db.delete(project)
        db.commit()
    logger.info("Deleted project %s", project_id)


def add_task_reference(db: Session, project_id: str, task_id: str) -> ProjectModel:
    project = get_project(db, project_id)
    if task_id not in project.tasks:
        project.tasks = [*project.tasks, task_id]
    return _save(db, project, "add task to project")


def remove_task_reference(db: Session, project_id: str, task_id: str) -> ProjectModel:
    project = get_project(db, project_id)
    project.tasks = [existing for existing in project.tasks if existing != task_id]
    return _save(db, project, "remove task from project")


def clear_task_references(db: Session, project_id: str) -> ProjectModel:
    project = get_project(db, project_id)
    project.tasks = []
    return _save(db, project, "clear project tasks")
