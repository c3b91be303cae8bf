from .task import Category, Priority, Task, TaskStatus
from .project import Project

# Export all models for easy importing
__all__ = ["Task", "Project", "Priority", "Category", "TaskStatus"]
