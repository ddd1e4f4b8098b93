"""
Domain error kinds raised by services and mapped to HTTP responses in one place
"""

import enum
from typing import Any, Optional


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    CONFLICT = "conflict"
    FORBIDDEN = "forbidden"
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"


STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.VALIDATION: 422,
    ErrorKind.UNAUTHORIZED: 401,
}


class DomainError(Exception):
    """Base error; callers branch on ``kind`` rather than on the subclass"""

    kind: ErrorKind = ErrorKind.BAD_REQUEST
    default_message = "Bad request"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


class NotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Not found"


class BadRequestError(DomainError):
    kind = ErrorKind.BAD_REQUEST
    default_message = "Bad request"


class ConflictError(DomainError):
    kind = ErrorKind.CONFLICT
    default_message = "Conflict"


class ForbiddenError(DomainError):
    kind = ErrorKind.FORBIDDEN
    default_message = "Forbidden"


class ValidationError(DomainError):
    kind = ErrorKind.VALIDATION
    default_message = "Validation failed"


class UnauthorizedError(DomainError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized"
