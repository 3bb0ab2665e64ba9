"""Server domain services."""

from .base import ServerService
from .errors import ErrorKind, ForbiddenError, NotFoundError, ServiceError, ValidationError
from .servers import SqlServerService

__all__ = [
    "ErrorKind",
    "ForbiddenError",
    "NotFoundError",
    "ServerService",
    "ServiceError",
    "SqlServerService",
    "ValidationError",
]
