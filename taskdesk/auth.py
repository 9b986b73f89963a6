"""Principal resolver: turns a bearer token into a ``Principal``.

Tokens are minted by the identity provider and signed with the shared
``TASKDESK_JWT_SECRET``. Expected claims:

- ``sub``: principal id (required)
- ``role``: ``user`` or ``admin`` (defaults to ``user``)
- ``username`` / ``email``: copied into the user directory
- ``exp``: verified when present
"""

import logging
from typing import Any, Optional

import jwt
from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from taskdesk import settings
from taskdesk.access import Principal
from taskdesk.database import get_session
from taskdesk.errors import Unauthenticated
from taskdesk.models import Role
from taskdesk.store import UserDirectory

logger = logging.getLogger(__name__)

# Missing credentials are reported as Unauthenticated rather than FastAPI's default 403
bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str) -> dict[str, Any]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise Unauthenticated("Token has expired")
    except jwt.InvalidTokenError as exc:
        logger.debug("Rejected bearer token: %s", exc)
        raise Unauthenticated("Invalid token")


def principal_from_claims(claims: dict[str, Any]) -> Principal:
    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject:
        raise Unauthenticated("Token is missing a subject")
    try:
        role = Role(claims.get("role") or Role.user.value)
    except ValueError:
        raise Unauthenticated(f"Unknown role {claims.get('role')!r}")
    return Principal(id=subject, role=role)


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    session: Session = Depends(get_session),
) -> Principal:
    """FastAPI dependency resolving the calling principal.

    The principal is recorded in the user directory so it can be named
    as an assignee and shown in task summaries.
    """
    if credentials is None:
        raise Unauthenticated("Not authenticated")

    claims = decode_token(credentials.credentials)
    principal = principal_from_claims(claims)
    UserDirectory(session).record(principal, claims.get("username"), claims.get("email"))
    return principal
