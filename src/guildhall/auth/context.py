"""Authentication context for request handling."""

from __future__ import annotations

from dataclasses import dataclass

from .adapters.base import Principal


@dataclass(frozen=True)
class AuthContext:
    """Runtime authentication context for a request."""

    principal: Principal | None
    token: str | None
    profile_id: int | None = None

    @property
    def is_authenticated(self) -> bool:
        """Check if the request carried a verified token."""
        return self.principal is not None

    @property
    def email(self) -> str | None:
        """Email of the authenticated profile, the identity used by resolvers."""
        if self.principal is None:
            return None
        return self.principal.get("email") or None

    @property
    def provider(self) -> str | None:
        """Get the authentication provider name."""
        return self.principal["provider"] if self.principal else None


ANONYMOUS = AuthContext(principal=None, token=None)
