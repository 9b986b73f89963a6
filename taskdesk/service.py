"""Task operations: validation, authorization, persistence and response enrichment.

Each public method handles one API operation for one principal. A
request touches at most one task record, so nothing here needs locking
or retries; concurrent writes are last-write-wins in the store.
"""

import logging
import re
from typing import Optional

from sqlmodel import Session

from taskdesk.access import Operation, Principal, authorize
from taskdesk.errors import InvalidIdentifier, NotFound, ValidationError
from taskdesk.models import Task, TaskPriority, TaskStatus, utcnow
from taskdesk.queries import Page, TaskFilters, build_list_query, build_mine_query
from taskdesk.schemas import Pagination, TaskCreate, TaskPage, TaskRead, TaskUpdate, UserSummary
from taskdesk.settings import DEFAULT_PAGE_SIZE
from taskdesk.store import TaskStore, UserDirectory

logger = logging.getLogger(__name__)

TASK_ID_PATTERN = re.compile(r"[0-9a-f]{32}")


def check_task_id(task_id: str) -> None:
    if not TASK_ID_PATTERN.fullmatch(task_id):
        raise InvalidIdentifier("Invalid task ID")


def completion_fields(task: Task, new_status: TaskStatus) -> dict:
    """Keep ``completed_at`` in step with a status change."""
    if new_status == TaskStatus.completed:
        if task.status != TaskStatus.completed or task.completed_at is None:
            return {"completed_at": utcnow()}
        return {}
    return {"completed_at": None}


class TaskService:
    def __init__(self, session: Session) -> None:
        self.tasks = TaskStore(session)
        self.users = UserDirectory(session)

    # -- operations -----------------------------------------------------------

    def create(self, principal: Principal, data: TaskCreate) -> TaskRead:
        """Create a task owned by ``principal``.

        Any principal may name any known user as assignee; without one the
        task is assigned to its creator.
        """
        authorize(Operation.create, principal)
        assignee = data.assigned_to or principal.id
        self._require_user(assignee)

        task = Task(
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            priority=data.priority,
            status=TaskStatus.pending,
            created_by=principal.id,
            assigned_to=assignee,
        )
        self.tasks.insert(task)
        logger.info("Task %s created by %s, assigned to %s", task.id, principal.id, assignee)
        return self.present(task)

    def read_one(self, principal: Principal, task_id: str) -> TaskRead:
        task = self._load(task_id)
        authorize(Operation.read, principal, task)
        return self.present(task)

    def list_tasks(
        self,
        principal: Principal,
        filters: TaskFilters = TaskFilters(),
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> TaskPage:
        query = build_list_query(principal, filters, page, limit)
        tasks, total = self.tasks.find(query)
        return self.present_page(Page(items=tasks, page=page, limit=limit, total_records=total))

    def list_mine(
        self,
        principal: Principal,
        filters: TaskFilters = TaskFilters(),
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> TaskPage:
        query = build_mine_query(principal, filters, page, limit)
        tasks, total = self.tasks.find(query)
        return self.present_page(Page(items=tasks, page=page, limit=limit, total_records=total))

    def update(self, principal: Principal, task_id: str, changes: TaskUpdate) -> TaskRead:
        """Apply a partial edit. Only fields present in the request are written."""
        task = self._load(task_id)
        authorize(Operation.update, principal, task)

        fields = changes.model_dump(exclude_unset=True)
        if "assigned_to" in fields:
            self._require_user(fields["assigned_to"])
        if "status" in fields:
            fields.update(completion_fields(task, fields["status"]))

        self.tasks.update(task, fields)
        logger.info("Task %s updated by %s: %s", task.id, principal.id, sorted(fields))
        return self.present(task)

    def delete(self, principal: Principal, task_id: str) -> None:
        task = self._load(task_id)
        authorize(Operation.delete, principal, task)
        self.tasks.delete_by_id(task.id)
        logger.info("Task %s deleted by %s", task_id, principal.id)

    def set_status(self, principal: Principal, task_id: str, status: TaskStatus) -> TaskRead:
        task = self._load(task_id)
        authorize(Operation.set_status, principal, task)

        fields = {"status": status, **completion_fields(task, status)}
        self.tasks.update(task, fields)
        logger.info("Task %s status set to %s by %s", task.id, status.value, principal.id)
        return self.present(task)

    def set_priority(self, principal: Principal, task_id: str, priority: TaskPriority) -> TaskRead:
        task = self._load(task_id)
        authorize(Operation.set_priority, principal, task)

        self.tasks.update(task, {"priority": priority})
        logger.info("Task %s priority set to %s by %s", task.id, priority.value, principal.id)
        return self.present(task)

    # -- presentation ---------------------------------------------------------

    def present(self, task: Task) -> TaskRead:
        """Build the API view of a task with assignee and creator summaries joined in."""
        return TaskRead(
            id=task.id,
            title=task.title,
            description=task.description,
            due_date=task.due_date,
            priority=task.priority,
            status=task.status,
            assigned_to=self._summary(task.assigned_to),
            created_by=self._summary(task.created_by),
            created_at=task.created_at,
            completed_at=task.completed_at,
        )

    def present_page(self, page: Page) -> TaskPage:
        return TaskPage(
            tasks=[self.present(task) for task in page.items],
            pagination=Pagination(
                current=page.page,
                total=page.total_pages,
                count=len(page.items),
                total_records=page.total_records,
            ),
        )

    # -- helpers --------------------------------------------------------------

    def _load(self, task_id: str) -> Task:
        check_task_id(task_id)
        task = self.tasks.find_by_id(task_id)
        if task is None:
            raise NotFound("Task not found")
        return task

    def _require_user(self, user_id: str) -> None:
        if not self.users.exists(user_id):
            raise ValidationError(
                "Assigned user does not exist",
                details=[{"field": "assignedTo", "message": f"unknown user {user_id!r}"}],
            )

    def _summary(self, user_id: str) -> UserSummary:
        summary: Optional[UserSummary] = self.users.summarize(user_id)
        return summary or UserSummary(id=user_id)
