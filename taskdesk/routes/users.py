"""User directory endpoints: the caller's own entry and the admin assignment list."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from taskdesk.access import Principal
from taskdesk.auth import get_current_principal
from taskdesk.database import get_session
from taskdesk.errors import AccessDenied, NotFound
from taskdesk.schemas import UserRead
from taskdesk.store import UserDirectory

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me")
def get_me(
    principal: Principal = Depends(get_current_principal),
    session: Session = Depends(get_session),
) -> UserRead:
    user = UserDirectory(session).get(principal.id)
    if user is None:
        raise NotFound("User not found")
    return UserRead.model_validate(user, from_attributes=True)


@router.get("/")
def list_users(
    principal: Principal = Depends(get_current_principal),
    session: Session = Depends(get_session),
) -> list[UserRead]:
    """List every known principal. Admins use this to pick assignees."""
    if not principal.is_admin:
        raise AccessDenied("Admin access required")
    return [
        UserRead.model_validate(user, from_attributes=True)
        for user in UserDirectory(session).list_users()
    ]
