"""Authentication dependencies for FastAPI."""

from __future__ import annotations

from fastapi import Header, HTTPException

from ..database.connection import get_async_session
from ..logging import get_logger, set_request_context
from .adapters.base import AuthenticationError
from .context import ANONYMOUS, AuthContext
from .factory import get_auth_adapter
from .provisioning import ensure_profile

logger = get_logger(__name__)


async def get_auth_context(authorization: str | None = Header(None)) -> AuthContext:
    """
    Extract authentication context from request headers.

    This function:
    1. Extracts Bearer token from Authorization header
    2. Verifies token using the configured auth adapter
    3. Performs JIT profile provisioning for the principal's email
    4. Returns AuthContext for the request

    For no-auth mode, any token (or none at all) will work.
    """
    adapter = get_auth_adapter()
    is_no_auth_mode = hasattr(adapter, "default_subject")  # NoAuthAdapter has this attribute

    if not authorization:
        if is_no_auth_mode:
            authorization = "Bearer dev-token"
        else:
            return ANONYMOUS

    if not authorization.startswith("Bearer "):
        logger.warning("Invalid authorization format received")
        raise HTTPException(
            status_code=401,
            detail="Invalid authorization format. Expected: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization[7:]

    if not token:
        logger.warning("Empty token provided")
        raise HTTPException(
            status_code=401,
            detail="Empty token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        principal = await adapter.verify_token(token)
    except AuthenticationError as e:
        logger.warning("Authentication failed", error=str(e))
        raise HTTPException(
            status_code=401,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    profile_id = None
    try:
        async with get_async_session() as db:
            profile_id = await ensure_profile(db, principal)
    except Exception as db_error:
        # The request still carries the identity; services look the profile up again.
        logger.error(
            "Profile provisioning failed",
            error=str(db_error),
            principal_provider=principal.get("provider"),
            principal_subject=principal.get("subject"),
        )

    set_request_context(profile_email=principal.get("email"))

    return AuthContext(principal=principal, token=token, profile_id=profile_id)


async def get_auth_context_optional(authorization: str | None = Header(None)) -> AuthContext:
    """
    Optional authentication - returns an anonymous context instead of failing.

    The GraphQL endpoint uses this and leaves rejection to field permissions.
    """
    try:
        return await get_auth_context(authorization)
    except HTTPException:
        return ANONYMOUS
