"""Task and user tables for the taskdesk API."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel


class Role(str, Enum):
    user = "user"
    admin = "admin"


class TaskStatus(str, Enum):
    pending = "pending"
    in_progress = "in-progress"
    completed = "completed"


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Read naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_task_id() -> str:
    return uuid.uuid4().hex


class User(SQLModel, table=True):
    """Directory entry for a principal, refreshed from its token claims."""
    __tablename__ = "users"

    id: str = Field(primary_key=True, max_length=64)
    username: str = Field(max_length=100)
    email: Optional[str] = Field(default=None, max_length=254)
    role: Role = Field(default=Role.user)
    created_at: datetime = Field(default_factory=utcnow)


class Task(SQLModel, table=True):
    """Task database table.

    ``created_by`` is written once at insert; every other field except
    ``id`` and ``created_at`` may be changed by a permitted editor.
    """
    __tablename__ = "tasks"

    id: str = Field(default_factory=new_task_id, primary_key=True, max_length=32)
    title: str = Field(max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    due_date: datetime = Field(index=True)
    priority: TaskPriority = Field(default=TaskPriority.medium)
    status: TaskStatus = Field(default=TaskStatus.pending)
    created_by: str = Field(foreign_key="users.id", index=True)
    assigned_to: str = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    completed_at: Optional[datetime] = Field(default=None)
