"""
Structured logging for Guildhall (structlog over stdlib logging)
"""

import base64
import logging
import secrets
import sys
import time
from contextvars import ContextVar
from typing import Any

import structlog

# Per-request values merged into every log event
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
profile_email_ctx: ContextVar[str | None] = ContextVar("profile_email", default=None)

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    "request_id": request_id_ctx,
    "profile_email": profile_email_ctx,
}


class RequestContextFilter:
    """structlog processor adding the current request id and profile email."""

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        _ = logger, method_name
        for key, var in _CONTEXT_VARS.items():
            value = var.get()
            if value and key not in event_dict:
                event_dict[key] = value
        return event_dict


def _resolve_level(debug: bool, level: str | None) -> int:
    if debug:
        return logging.DEBUG
    if level:
        return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    return logging.INFO


def configure_logging(debug: bool = False, level: str | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Debug mode renders coloured console lines at DEBUG level; otherwise
    events are emitted as JSON at ``level`` (INFO when unset or unknown).
    """
    log_level = _resolve_level(debug, level)

    logging.basicConfig(level=log_level, stream=sys.stdout, format="%(message)s", force=True)

    renderer: Any = (
        structlog.dev.ConsoleRenderer(colors=True) if debug else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            RequestContextFilter(),
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """Short sortable id: 8 bytes of microsecond timestamp plus 2 random bytes, base64url."""
    stamp = int(time.time() * 1_000_000).to_bytes(8, byteorder="big")
    raw = stamp + secrets.token_bytes(2)
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def set_request_context(request_id: str | None = None, profile_email: str | None = None) -> None:
    """Bind values for the current request.

    A new request id is generated when none is given and no id is bound yet,
    so a later call that only adds the profile email keeps the existing id.
    """
    if request_id is not None:
        request_id_ctx.set(request_id)
    elif request_id_ctx.get() is None:
        request_id_ctx.set(generate_request_id())

    if profile_email is not None:
        profile_email_ctx.set(profile_email)


def clear_request_context() -> None:
    for var in _CONTEXT_VARS.values():
        var.set(None)


def get_request_id() -> str | None:
    return request_id_ctx.get()
