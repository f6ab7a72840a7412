"""
Error taxonomy shared by the services and the HTTP layer.

Services raise these; ``factdesk.main`` turns them into JSON responses of the
form ``{"error": <code>, "message": <text>}`` with the matching status code.
"""
from typing import Any, Optional


class FactDeskError(Exception):
    """Base class for errors that are reported to the caller."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(FactDeskError):
    """Malformed or missing input."""

    status_code = 400
    code = "VALIDATION_ERROR"


class ForbiddenError(FactDeskError):
    """The actor is not allowed to perform the action."""

    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(FactDeskError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(FactDeskError):
    """Duplicate resource, e.g. a second fact-checker application."""

    status_code = 409
    code = "CONFLICT"


class IllegalTransitionError(FactDeskError):
    """The claim status machine does not permit the requested change."""

    status_code = 409
    code = "ILLEGAL_TRANSITION"


class IneligibleError(FactDeskError):
    """The fact-checker cannot take the assignment or action."""

    status_code = 422
    code = "INELIGIBLE"


class InternalError(FactDeskError):
    """Unexpected failure. The message is always generic."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "An unexpected error occurred while processing your request"):
        super().__init__(message)
