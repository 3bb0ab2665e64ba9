"""Adapter for JWTs issued by Guildhall itself (shared HMAC secret)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt.exceptions import InvalidTokenError

from ...logging import get_logger
from .base import AuthenticationError, Principal

logger = get_logger(__name__)

# Token claim -> Principal key
_PROFILE_CLAIMS = {
    "email": "email",
    "name": "display_name",
    "picture": "avatar_url",
}


class JWTAuthAdapter:
    """Verifies and issues signed tokens whose ``email`` claim identifies the profile."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "guildhall",
        audience: str = "guildhall-api",
        token_expiry_hours: int = 24,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.token_expiry_hours = token_expiry_hours

    def _decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
            )
        except InvalidTokenError as e:
            logger.warning("JWT rejected", reason=str(e))
            raise AuthenticationError("Invalid token") from e

    async def verify_token(self, token: str) -> Principal:
        payload = self._decode(token)

        subject = payload.get("sub")
        if not subject:
            raise AuthenticationError("Missing 'sub' claim in token")

        principal = Principal(provider="jwt", subject=str(subject), claims=payload)
        for claim, key in _PROFILE_CLAIMS.items():
            if value := payload.get(claim):
                principal[key] = value  # type: ignore[literal-required]
        return principal

    async def issue_token(self, subject: str | None = None, claims: dict | None = None) -> str:
        """Sign a token valid for ``token_expiry_hours``; ``claims`` are merged in last."""
        issued_at = datetime.now(UTC)
        payload: dict[str, Any] = {
            "iss": self.issuer,
            "aud": self.audience,
            "iat": issued_at,
            "nbf": issued_at,
            "exp": issued_at + timedelta(hours=self.token_expiry_hours),
        }
        if subject:
            payload["sub"] = subject
        payload.update(claims or {})

        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
