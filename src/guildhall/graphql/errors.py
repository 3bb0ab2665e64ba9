"""
Translation of service failures into client-facing GraphQL errors
"""

from graphql import GraphQLError

from ..logging import get_logger
from ..services.errors import ErrorKind, ServiceError

logger = get_logger(__name__)

PROFILE_NOT_FOUND = "Profile not found"


def graphql_error(message: str, kind: ErrorKind) -> GraphQLError:
    """Build a GraphQLError tagged with its error kind and matching HTTP status."""
    return GraphQLError(message, extensions={"code": kind.value, "status": kind.http_status})


def profile_not_found_error() -> GraphQLError:
    return graphql_error(PROFILE_NOT_FOUND, ErrorKind.FORBIDDEN)


def to_graphql_error(error: Exception) -> GraphQLError:
    """
    Convert an exception raised below a resolver into a GraphQLError.

    Service errors keep their message and kind; anything else is reported
    as INTERNAL with its message.
    """
    if isinstance(error, GraphQLError):
        return error

    if isinstance(error, ServiceError):
        return graphql_error(error.message, error.kind)

    logger.error("Unexpected resolver error", error=str(error), error_type=type(error).__name__)
    return graphql_error(str(error) or "Internal server error", ErrorKind.INTERNAL)
