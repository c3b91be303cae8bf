from sqlmodel import SQLModel, Field
from sqlalchemy import JSON, Column
from datetime import datetime
from typing import List
from uuid import uuid4

from .columns import UTCDateTime, utcnow

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000


class Project(SQLModel, table=True):
    """Project model grouping tasks by reference.

    `tasks` is an ordered list of task ids. There is no foreign key and no
    cascade: deleting either side leaves the other untouched.
    """
    __tablename__ = "projects"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str = Field(max_length=NAME_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    # Reassign the list on change; in-place mutation of a JSON column is not tracked.
    tasks: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime(), index=True, nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime(), nullable=False))

    @property
    def task_count(self) -> int:
        return len(self.tasks or [])
