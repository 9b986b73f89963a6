"""Error taxonomy shared by the task operations and the HTTP layer."""

from typing import Optional


class TaskdeskError(Exception):
    """Base class for errors reported back to API callers.

    Each subclass carries the HTTP status and a short machine-readable
    category so the client can tell them apart.
    """

    status_code = 500
    category = "internal_error"

    def __init__(self, message: str, details: Optional[list[dict]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_dict(self) -> dict:
        body = {"error": self.category, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(TaskdeskError):
    status_code = 400
    category = "validation_error"


class InvalidIdentifier(ValidationError):
    category = "invalid_identifier"


class NotFound(TaskdeskError):
    status_code = 404
    category = "not_found"


class AccessDenied(TaskdeskError):
    status_code = 403
    category = "access_denied"


class Unauthenticated(TaskdeskError):
    status_code = 401
    category = "unauthenticated"
