"""
Domain errors raised by the service layer

Each error carries the HTTP status the transport layer maps it to.
"""
from typing import Any, Optional


class QuizPlatformError(Exception):
    """Base class for all domain errors"""

    status_code = 500
    error = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(QuizPlatformError):
    """A referenced quiz, question, option, user or attempt does not exist"""

    status_code = 404
    error = "not_found"

    def __init__(self, resource: str, identifier: Any, field: str = "id"):
        super().__init__(f"{resource} not found with {field}: {identifier}")
        self.resource = resource
        self.identifier = identifier


class UnauthorizedError(QuizPlatformError):
    """Caller does not own the referenced attempt"""

    status_code = 403
    error = "unauthorized"


class StateConflictError(QuizPlatformError):
    """Operation not allowed in the current state of the quiz or attempt"""

    status_code = 409
    error = "state_conflict"

    def __init__(self, message: str, attempt_count: Optional[int] = None):
        super().__init__(message)
        self.attempt_count = attempt_count


class DomainValidationError(QuizPlatformError):
    """Entity field violates a model invariant"""

    status_code = 422
    error = "validation_error"

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
