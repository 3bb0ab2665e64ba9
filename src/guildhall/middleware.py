"""
Request logging middleware
"""

import json
import re
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging import (
    clear_request_context,
    generate_request_id,
    get_logger,
    set_request_context,
)

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
GRAPHQL_PATH = "/graphql"

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "token",
        "api_key",
        "secret",
        "auth",
        "authorization",
        "key",
        "jwt",
        "session",
        "cookie",
        "credentials",
    }
)

# GraphQL payload fields never logged from a query string
_GRAPHQL_PARAMS = ("query", "variables", "extensions")

_OPERATION_RE = re.compile(r"\b(query|mutation)\s+(\w+)")

REDACTED = "[REDACTED]"


def sanitize_query_params(params: dict[str, Any]) -> dict[str, Any]:
    """Redact query parameters whose name contains a sensitive keyword."""
    return {
        key: REDACTED if any(s in key.lower() for s in SENSITIVE_KEYS) else value
        for key, value in params.items()
    }


def operation_name_from_query(query: Any) -> str | None:
    """Derive an operation label from a raw GraphQL document.

    Mutations are prefixed with ``mutation:``; anonymous documents are
    labelled ``unnamed_operation``.
    """
    if not isinstance(query, str) or not query:
        return None
    if "__schema" in query or "IntrospectionQuery" in query:
        return "__introspection"

    match = _OPERATION_RE.search(query)
    if match is None:
        return "unnamed_operation"
    kind, name = match.groups()
    return f"mutation:{name}" if kind == "mutation" else name


def _operation_from_payload(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None
    op = payload.get("operationName")
    if isinstance(op, str) and op:
        return op
    return operation_name_from_query(payload.get("query"))


async def extract_graphql_operation_name(request: Request) -> str | None:
    if request.url.path != GRAPHQL_PATH:
        return None

    if request.method == "GET":
        return _operation_from_payload(dict(request.query_params))

    if request.method != "POST":
        return None

    content_type = request.headers.get("content-type", "")
    if "multipart/form-data" in content_type:
        # Upload bodies are not buffered just to name the operation
        return "multipart_operation"
    if not content_type.startswith("application/json"):
        return None

    body = await request.body()
    if not body:
        return None
    try:
        return _operation_from_payload(json.loads(body))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def _query_params_for_log(request: Request) -> dict[str, Any] | None:
    if not request.query_params:
        return None
    params = sanitize_query_params(dict(request.query_params))
    if request.url.path == GRAPHQL_PATH:
        for key in _GRAPHQL_PARAMS:
            if key in params:
                params[key] = REDACTED
    return params


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id for log correlation and log each request's outcome."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = generate_request_id()
        set_request_context(request_id=request_id)

        try:
            graphql_operation = await extract_graphql_operation_name(request)

            logger.info(
                "Request started",
                method=request.method,
                path=request.url.path,
                query_params=_query_params_for_log(request),
                user_agent=request.headers.get("user-agent"),
                remote_addr=request.client.host if request.client else None,
                graphql_operation=graphql_operation,
            )

            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id

            logger.info(
                "Request completed",
                status_code=response.status_code,
                method=request.method,
                path=request.url.path,
                graphql_operation=graphql_operation,
            )
            return response

        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            raise

        finally:
            clear_request_context()
