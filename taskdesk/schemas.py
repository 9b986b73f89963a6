"""Request and response shapes for the task API.

Field names are snake_case in Python and camelCase on the wire
(``dueDate``, ``assignedTo``, ``totalRecords``); both spellings are
accepted on input.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from taskdesk.models import Role, TaskPriority, TaskStatus, as_utc


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskCreate(ApiModel):
    """Schema for creating a task. ``createdBy`` and ``status`` are never read from the client."""
    title: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    due_date: datetime
    priority: TaskPriority
    assigned_to: Optional[str] = Field(default=None, min_length=1)

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, value: datetime) -> datetime:
        return as_utc(value)


class TaskUpdate(ApiModel):
    """Schema for a partial task edit. Omitted fields keep their stored value."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    due_date: Optional[datetime] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    assigned_to: Optional[str] = Field(default=None, min_length=1)

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value) if value is not None else None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "TaskUpdate":
        # description is the only field that may be cleared with null
        for name in ("title", "due_date", "priority", "status", "assigned_to"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self


class StatusChange(ApiModel):
    status: TaskStatus


class PriorityChange(ApiModel):
    priority: TaskPriority


class UserSummary(ApiModel):
    id: str
    username: Optional[str] = None
    email: Optional[str] = None


class TaskRead(ApiModel):
    id: str
    title: str
    description: Optional[str] = None
    due_date: datetime
    priority: TaskPriority
    status: TaskStatus
    assigned_to: UserSummary
    created_by: UserSummary
    created_at: datetime
    completed_at: Optional[datetime] = None

    @field_validator("due_date", "created_at", "completed_at")
    @classmethod
    def stored_times_are_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite hands back naive values on some driver versions
        return as_utc(value) if value is not None else None


class TaskEnvelope(ApiModel):
    message: str
    task: TaskRead


class MessageResponse(ApiModel):
    message: str


class Pagination(ApiModel):
    current: int
    total: int
    count: int
    total_records: int


class TaskPage(ApiModel):
    tasks: list[TaskRead]
    pagination: Pagination


class UserRead(ApiModel):
    id: str
    username: str
    email: Optional[str] = None
    role: Role
    created_at: datetime
