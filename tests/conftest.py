# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from taskboard.database import get_db
from taskboard.main import app
from taskboard.models import Project, Task
from taskboard.models.columns import utcnow


@pytest.fixture()
def engine():
    """
    Fresh in-memory SQLite database per test.

    StaticPool keeps a single connection, so every session sees the same
    in-memory database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    """TestClient whose requests use the in-memory database."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def make_task(db):
    """
    Insert a task row directly, bypassing the service layer.

    Each call gets a creation time one minute after the previous one so
    newest-first ordering is deterministic.
    """
    base = utcnow() - timedelta(days=1)
    counter = {"n": 0}

    def _make(title: str = "Task", created_at: datetime | None = None, **fields) -> Task:
        counter["n"] += 1
        task = Task(title=title, **fields)
        task.created_at = created_at or base + timedelta(minutes=counter["n"])
        task.updated_at = task.created_at
        if task.completed and task.completed_at is None:
            task.completed_at = task.created_at
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    return _make


@pytest.fixture()
def make_project(db):
    def _make(name: str = "Project", tasks: list[str] | None = None, **fields) -> Project:
        project = Project(name=name, tasks=list(tasks or []), **fields)
        db.add(project)
        db.commit()
        db.refresh(project)
        return project

    return _make
