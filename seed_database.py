#!/usr/bin/env python
"""Replace all tasks with a small demo data set and print the stats."""
from datetime import timedelta

from taskboard.database import create_tables, get_session
from taskboard.models import Task
from taskboard.models.columns import utcnow
from taskboard.schemas.task import TaskCreate
from taskboard.services.stats import get_task_stats
from taskboard.services.tasks import create_task


def _in_days(days: int):
    return utcnow() + timedelta(days=days)


INITIAL_TASKS = [
    dict(title="Set up the development environment",
         description="Install Python, FastAPI and configure the project",
         priority="high", category="work", due_date=_in_days(7), completed=True),
    dict(title="Build the routing layer",
         description="Implement page and REST API routes",
         priority="high", category="work", due_date=_in_days(10), completed=True),
    dict(title="Implement dashboard features",
         description="Charts and task statistics backed by the database",
         priority="medium", category="work", due_date=_in_days(15)),
    dict(title="Test the application",
         description="Run functional and performance tests",
         priority="medium", category="work", due_date=_in_days(20)),
    dict(title="Exercise",
         description="30 minute walk in the park",
         priority="low", category="health", due_date=_in_days(3)),
    dict(title="Study advanced Python",
         description="Generators, context managers and asyncio",
         priority="medium", category="study", due_date=_in_days(25)),
    dict(title="Organize personal documents",
         description="File important papers and tidy the folder",
         priority="low", category="personal", due_date=_in_days(5), completed=True),
    dict(title="Review project code",
         description="Code review and refactor legacy modules",
         priority="high", category="work", due_date=_in_days(30)),
    dict(title="Book a medical appointment",
         description="Schedule the yearly check-up",
         priority="medium", category="health", due_date=_in_days(12)),
    dict(title="Read a programming book",
         description='Keep reading "Clean Code", chapters 5-8',
         priority="low", category="study", due_date=_in_days(35)),
]

# Create tables if not exist
create_tables()

with get_session() as db:
    removed = db.query(Task).delete(synchronize_session=False)
    db.commit()
    print(f"Removed {removed} existing tasks")

    for fields in INITIAL_TASKS:
        create_task(db, TaskCreate(**fields))
    print(f"Created {len(INITIAL_TASKS)} tasks")

    stats = get_task_stats(db)
    print("Task stats:")
    print(f"  Total: {stats['total']}")
    print(f"  Completed: {stats['completed']}")
    print(f"  Pending: {stats['pending']}")
    print(f"  Completion rate: {stats['completion_rate']}%")
