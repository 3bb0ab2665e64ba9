"""Error kinds raised by the service layer."""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Classification carried by every service error."""

    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    INTERNAL = "INTERNAL"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


class ServiceError(Exception):
    """Base exception for server/channel/member operations."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class ValidationError(ServiceError):
    """Invalid or missing input."""

    kind = ErrorKind.VALIDATION


class NotFoundError(ServiceError):
    """Referenced profile, server, channel or member does not exist."""

    kind = ErrorKind.NOT_FOUND


class ForbiddenError(ServiceError):
    """Caller lacks the role required for the operation."""

    kind = ErrorKind.FORBIDDEN
