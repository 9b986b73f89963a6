"""SQLModel-backed task store and user directory."""

import logging
from typing import Optional

from sqlmodel import Session, func, select

from taskdesk.access import Principal
from taskdesk.models import Task, User
from taskdesk.queries import ListQuery
from taskdesk.schemas import UserSummary

logger = logging.getLogger(__name__)


class TaskStore:
    """Persistence for task records. Holds no state beyond its session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def insert(self, task: Task) -> str:
        self._session.add(task)
        self._session.commit()
        self._session.refresh(task)
        return task.id

    def find_by_id(self, task_id: str) -> Optional[Task]:
        return self._session.get(Task, task_id)

    def find(self, query: ListQuery) -> tuple[list[Task], int]:
        """Run a list query, returning the requested slice and the total match count."""
        statement = select(Task)
        count_statement = select(func.count()).select_from(Task)
        if query.conditions:
            statement = statement.where(*query.conditions)
            count_statement = count_statement.where(*query.conditions)
        statement = statement.order_by(*query.order_by).offset(query.offset).limit(query.limit)

        tasks = list(self._session.exec(statement).all())
        total = self._session.exec(count_statement).one()
        return tasks, total

    def update(self, task: Task, fields: dict) -> Task:
        for key, value in fields.items():
            setattr(task, key, value)
        self._session.add(task)
        self._session.commit()
        self._session.refresh(task)
        return task

    def delete_by_id(self, task_id: str) -> bool:
        task = self._session.get(Task, task_id)
        if task is None:
            return False
        self._session.delete(task)
        self._session.commit()
        return True


class UserDirectory:
    """Lookup of principals by id, used to validate assignees and enrich responses."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: str) -> Optional[User]:
        return self._session.get(User, user_id)

    def exists(self, user_id: str) -> bool:
        return self.get(user_id) is not None

    def summarize(self, user_id: str) -> Optional[UserSummary]:
        user = self.get(user_id)
        if user is None:
            return None
        return UserSummary(id=user.id, username=user.username, email=user.email)

    def record(self, principal: Principal, username: Optional[str], email: Optional[str]) -> User:
        """Create or refresh the directory entry for an authenticated principal."""
        user = self.get(principal.id)
        if user is None:
            user = User(id=principal.id, username=username or principal.id, email=email, role=principal.role)
            logger.info("Registered principal %s (%s) in user directory", principal.id, principal.role.value)
        else:
            changed = False
            if username and user.username != username:
                user.username = username
                changed = True
            if email and user.email != email:
                user.email = email
                changed = True
            if user.role != principal.role:
                user.role = principal.role
                changed = True
            if not changed:
                return user
        self._session.add(user)
        self._session.commit()
        self._session.refresh(user)
        return user

    def list_users(self) -> list[User]:
        return list(self._session.exec(select(User).order_by(User.username)).all())
