"""List query construction for task collections.

The builders here only describe a query: which rows (a conjunction of
SQL conditions), in which order, and which slice. ``TaskStore.find`` runs it.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional

from sqlmodel import or_

from taskdesk import settings
from taskdesk.access import Principal
from taskdesk.errors import ValidationError
from taskdesk.models import Task, TaskPriority, TaskStatus


@dataclass(frozen=True)
class TaskFilters:
    """Optional equality filters supplied by the caller.

    ``assigned_to`` is honoured for admins only.
    """
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to: Optional[str] = None


@dataclass(frozen=True)
class ListQuery:
    conditions: tuple[Any, ...]
    order_by: tuple[Any, ...]
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page:
    items: list[Task]
    page: int
    limit: int
    total_records: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_records / self.limit)


def validate_paging(page: int, limit: int) -> None:
    if page < 1:
        raise ValidationError("page must be 1 or greater")
    if not 1 <= limit <= settings.MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {settings.MAX_PAGE_SIZE}")


def ownership_scope(principal: Principal) -> list[Any]:
    """Rows a principal may see in a general listing: all for admins, otherwise assigned OR created."""
    if principal.is_admin:
        return []
    return [or_(Task.assigned_to == principal.id, Task.created_by == principal.id)]


def equality_filters(filters: TaskFilters, allow_assignee_filter: bool) -> list[Any]:
    conditions = []
    if filters.status is not None:
        conditions.append(Task.status == filters.status)
    if filters.priority is not None:
        conditions.append(Task.priority == filters.priority)
    if allow_assignee_filter and filters.assigned_to:
        conditions.append(Task.assigned_to == filters.assigned_to)
    return conditions


def build_list_query(
    principal: Principal,
    filters: TaskFilters = TaskFilters(),
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_SIZE,
) -> ListQuery:
    """Query for the general task listing, newest first."""
    validate_paging(page, limit)
    conditions = ownership_scope(principal) + equality_filters(
        filters, allow_assignee_filter=principal.is_admin
    )
    return ListQuery(
        conditions=tuple(conditions),
        order_by=(Task.created_at.desc(), Task.id.desc()),
        page=page,
        limit=limit,
    )


def build_mine_query(
    principal: Principal,
    filters: TaskFilters = TaskFilters(),
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_SIZE,
) -> ListQuery:
    """Query for tasks assigned to the principal, soonest due first.

    Tasks the principal created for someone else are not included.
    """
    validate_paging(page, limit)
    conditions = [Task.assigned_to == principal.id] + equality_filters(
        filters, allow_assignee_filter=False
    )
    return ListQuery(
        conditions=tuple(conditions),
        order_by=(Task.due_date.asc(), Task.id.asc()),
        page=page,
        limit=limit,
    )
