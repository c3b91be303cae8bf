from sqlmodel import SQLModel, Field
from sqlalchemy import Column
from datetime import datetime
from typing import Optional
from uuid import uuid4
import enum

from .columns import UTCDateTime, as_utc, utcnow


class Priority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Category(str, enum.Enum):
    WORK = "work"
    PERSONAL = "personal"
    STUDY = "study"
    HEALTH = "health"
    OTHER = "other"


class TaskStatus(str, enum.Enum):
    COMPLETED = "completed"
    PENDING = "pending"


PRIORITY_LABELS = {
    Priority.HIGH.value: "High",
    Priority.MEDIUM.value: "Medium",
    Priority.LOW.value: "Low",
}

CATEGORY_LABELS = {
    Category.WORK.value: "Work",
    Category.PERSONAL.value: "Personal",
    Category.STUDY.value: "Study",
    Category.HEALTH.value: "Health",
    Category.OTHER.value: "Other",
}

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class Task(SQLModel, table=True):
    """Task model for todo items.

    Priority and category are stored as plain strings; the allowed values are
    checked before every write, so filters with unknown values simply match
    nothing instead of failing at bind time.
    """
    __tablename__ = "tasks"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    priority: str = Field(default=Priority.MEDIUM.value, index=True)
    category: str = Field(default=Category.WORK.value, index=True)
    due_date: Optional[datetime] = Field(default=None, sa_column=Column(UTCDateTime(), index=True))
    completed: bool = Field(default=False, index=True)
    completed_at: Optional[datetime] = Field(default=None, sa_column=Column(UTCDateTime()))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime(), index=True, nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime(), nullable=False))

    @property
    def is_overdue(self) -> bool:
        if self.due_date is None or self.completed:
            return False
        return as_utc(self.due_date) < utcnow()

    @property
    def priority_text(self) -> str:
        return PRIORITY_LABELS.get(self.priority, self.priority)

    @property
    def category_text(self) -> str:
        return CATEGORY_LABELS.get(self.category, self.category)
