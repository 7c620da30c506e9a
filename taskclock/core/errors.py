"""Typed service errors and their classification for the HTTP boundary."""

from pydantic import BaseModel

from taskclock.core.config import Constants


class TaskClockError(Exception):
    """Base class for errors raised by the service layer."""

    status_code: int = Constants.HTTP_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskClockError):
    """Malformed or out-of-range input."""

    status_code = Constants.HTTP_BAD_REQUEST


class ForbiddenError(TaskClockError):
    """Caller is authenticated but may not act on this entity."""

    status_code = Constants.HTTP_FORBIDDEN


class NotFoundError(TaskClockError):
    """A referenced entity the operation depends on does not exist."""

    status_code = Constants.HTTP_NOT_FOUND


class ConflictError(TaskClockError):
    """The entity is in a state that does not allow the operation."""

    status_code = Constants.HTTP_BAD_REQUEST


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_VALIDATION = "ERR_VALIDATION"
    ERR_UNAUTHORIZED = "ERR_UNAUTHORIZED"
    ERR_FORBIDDEN = "ERR_FORBIDDEN"
    ERR_NOT_FOUND = "ERR_NOT_FOUND"
    ERR_CONFLICT = "ERR_CONFLICT"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response returned to API clients."""

    code: str
    message: str
    status_code: int


_ERROR_CODES: dict[type[TaskClockError], str] = {
    ValidationError: ErrorCode.ERR_VALIDATION,
    ForbiddenError: ErrorCode.ERR_FORBIDDEN,
    NotFoundError: ErrorCode.ERR_NOT_FOUND,
    ConflictError: ErrorCode.ERR_CONFLICT,
}


def classify_error_with_response(exception: Exception) -> ErrorResponse:
    """Classify an error and return the structured response for it.

    Typed service errors keep their own message; anything else is reported
    as an opaque server error so internals never leak to clients.

    Args:
        exception: The exception raised while handling a request

    Returns:
        ErrorResponse with code, message, and HTTP status code
    """
    for error_type, code in _ERROR_CODES.items():
        if isinstance(exception, error_type):
            return ErrorResponse(code=code, message=exception.message, status_code=error_type.status_code)

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        status_code=Constants.HTTP_SERVER_ERROR,
    )
