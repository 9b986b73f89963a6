"""Task endpoints. Authorization and validation live in ``TaskService``."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from taskdesk.access import Principal
from taskdesk.auth import get_current_principal
from taskdesk.database import get_session
from taskdesk.models import TaskPriority, TaskStatus
from taskdesk.queries import TaskFilters
from taskdesk.schemas import (
    MessageResponse,
    PriorityChange,
    StatusChange,
    TaskCreate,
    TaskEnvelope,
    TaskPage,
    TaskRead,
    TaskUpdate,
)
from taskdesk.service import TaskService
from taskdesk.settings import DEFAULT_PAGE_SIZE

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def get_task_service(session: Session = Depends(get_session)) -> TaskService:
    return TaskService(session)


@router.post("/", status_code=201)
def create_task(
    body: TaskCreate,
    principal: Principal = Depends(get_current_principal),
    service: TaskService = Depends(get_task_service),
) -> TaskEnvelope:
    """Create a task. The caller becomes its creator and, by default, its assignee."""
    task = service.create(principal, body)
    return TaskEnvelope(message="Task created successfully", task=task)


@router.get("/")
def list_tasks(
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    assigned_to: Optional[str] = Query(default=None, alias="assignedTo"),
    principal: Principal = Depends(get_current_principal),
    service: TaskService = Depends(get_task_service),
) -> TaskPage:
    """List visible tasks, newest first. ``assignedTo`` only applies to admins."""
    filters = TaskFilters(status=status, priority=priority, assigned_to=assigned_to)
    return service.list_tasks(principal, filters, page, limit)


@router.get("/my-tasks")
def list_my_tasks(
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    principal: Principal = Depends(get_current_principal),
    service: TaskService = Depends(get_task_service),
) -> TaskPage:
    """List tasks assigned to the caller, soonest due first."""
    filters = TaskFilters(status=status, priority=priority)
    return service.list_mine(principal, filters, page, limit)


@router.get("/{task_id}")
def get_task(
    task_id: str,
    principal: Principal = Depends(get_current_principal),
    service: TaskService = Depends(get_task_service),
) -> TaskRead:
    return service.read_one(principal, task_id)


@router.put("/{task_id}")
def update_task(
    task_id: str,
    body: TaskUpdate,
    principal: Principal = Depends(get_current_principal),
    service: TaskService = Depends(get_task_service),
) -> TaskEnvelope:
    """Update an existing task. Only provided fields are changed."""
    task = service.update(principal, task_id, body)
    return TaskEnvelope(message="Task updated successfully", task=task)


@router.patch("/{task_id}/status")
def update_task_status(
    task_id: str,
    body: StatusChange,
    principal: Principal = Depends(get_current_principal),
    service: TaskService = Depends(get_task_service),
) -> TaskEnvelope:
    task = service.set_status(principal, task_id, body.status)
    return TaskEnvelope(message="Task status updated successfully", task=task)


@router.patch("/{task_id}/priority")
def update_task_priority(
    task_id: str,
    body: PriorityChange,
    principal: Principal = Depends(get_current_principal),
    service: TaskService = Depends(get_task_service),
) -> TaskEnvelope:
    task = service.set_priority(principal, task_id, body.priority)
    return TaskEnvelope(message="Task priority updated successfully", task=task)


@router.delete("/{task_id}")
def delete_task(
    task_id: str,
    principal: Principal = Depends(get_current_principal),
    service: TaskService = Depends(get_task_service),
) -> MessageResponse:
    service.delete(principal, task_id)
    return MessageResponse(message="Task deleted successfully")
