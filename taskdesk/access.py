"""Who may do what to which task.

Every task operation maps to one predicate over ``(principal, task)``.
Admins pass every check. Otherwise the relation between the principal
and the task decides it:

=============  =========  ========
operation      assignee   creator
=============  =========  ========
read           yes        yes
update         no         yes
delete         no         yes
set_status     yes        yes
set_priority   no         yes
=============  =========  ========

Creating a task needs nothing beyond authentication.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from taskdesk.errors import AccessDenied
from taskdesk.models import Role, Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """An authenticated caller as produced by the principal resolver."""
    id: str
    role: Role = Role.user

    @property
    def is_admin(self) -> bool:
        return self.role == Role.admin


class Operation(str, Enum):
    create = "create"
    read = "read"
    update = "update"
    delete = "delete"
    set_status = "set_status"
    set_priority = "set_priority"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(False, reason)


def is_creator(principal: Principal, task: Task) -> bool:
    return principal.id == task.created_by


def is_assignee(principal: Principal, task: Task) -> bool:
    return principal.id == task.assigned_to


def _creator_only(principal: Principal, task: Task) -> bool:
    return is_creator(principal, task)


def _assignee_or_creator(principal: Principal, task: Task) -> bool:
    return is_assignee(principal, task) or is_creator(principal, task)


_RULES: dict[Operation, tuple[Callable[[Principal, Task], bool], str]] = {
    Operation.read: (
        _assignee_or_creator,
        "Only the assignee, the creator or an admin can view this task",
    ),
    Operation.update: (
        _creator_only,
        "Only the creator or an admin can edit this task",
    ),
    Operation.delete: (
        _creator_only,
        "Only the creator or an admin can delete this task",
    ),
    Operation.set_status: (
        _assignee_or_creator,
        "Only the assignee, the creator or an admin can change the status",
    ),
    Operation.set_priority: (
        _creator_only,
        "Only the creator or an admin can change the priority",
    ),
}


def decide(operation: Operation, principal: Principal, task: Optional[Task] = None) -> Decision:
    """Evaluate the permission rule for ``operation``.

    ``task`` is required for every operation except ``create``.
    """
    if operation is Operation.create:
        return Decision.allow()
    if task is None:
        raise ValueError(f"{operation.value} needs the target task")
    if principal.is_admin:
        return Decision.allow()

    predicate, reason = _RULES[operation]
    if predicate(principal, task):
        return Decision.allow()
    return Decision.deny(reason)


def authorize(operation: Operation, principal: Principal, task: Optional[Task] = None) -> None:
    """Raise ``AccessDenied`` unless ``principal`` may perform ``operation``."""
    decision = decide(operation, principal, task)
    if not decision.allowed:
        logger.warning(
            "Denied %s on task %s for principal %s",
            operation.value, task.id if task else None, principal.id,
        )
        raise AccessDenied(decision.reason or "Access denied")
