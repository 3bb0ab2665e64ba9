"""No-auth adapter for local development without authentication."""

from __future__ import annotations

import os

from ...logging import get_logger
from .base import AuthenticationError, Principal

logger = get_logger(__name__)


class NoAuthAdapter:
    """
    No-auth adapter that bypasses authentication for local development.

    Every request is treated as authenticated with a default development
    profile. WARNING: Only use this in development environments!
    """

    def __init__(
        self,
        default_subject: str = "dev-user",
        default_email: str = "dev@example.com",
        default_name: str = "Development User",
    ):
        self.default_subject = default_subject
        self.default_email = default_email
        self.default_name = default_name

        environment = os.getenv("GUILDHALL_ENVIRONMENT", "").lower()
        if environment in ("production", "prod"):
            logger.error(
                "NoAuthAdapter detected in production environment",
                environment=environment,
            )
            raise RuntimeError(
                "NoAuthAdapter cannot be used in production environments. "
                "Please configure a proper authentication provider."
            )

        logger.warning(
            "NoAuthAdapter is active - ALL requests will be treated as authenticated! "
            "This should ONLY be used in development.",
            subject=default_subject,
            email=default_email,
        )

    async def verify_token(self, token: str) -> Principal:
        """
        Always returns the default principal - no actual verification.

        Any non-empty token is accepted.
        """
        if not token:
            raise AuthenticationError("Token required (even in no-auth mode)")

        return Principal(
            provider="none",
            subject=self.default_subject,
            email=self.default_email,
            display_name=self.default_name,
            claims={"mode": "development"},
        )

    async def issue_token(self, subject: str | None = None, claims: dict | None = None) -> str:
        """Issue a fake development token."""
        token_parts = ["dev-token", subject or self.default_subject, "no-auth-mode"]

        if claims:
            token_parts.extend(f"{k}={v}" for k, v in claims.items())

        return "|".join(token_parts)
