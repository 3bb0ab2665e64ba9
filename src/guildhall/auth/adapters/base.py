"""Shared types for token adapters: the verified principal and the adapter contract."""

from __future__ import annotations

from typing import Literal, NotRequired, Protocol, TypedDict


class Principal(TypedDict):
    """Who a verified token speaks for.

    ``email`` is what ties the caller to a Guildhall profile; a principal
    without one is authenticated but cannot act on servers.
    """

    provider: Literal["jwt", "none"]
    subject: str
    email: NotRequired[str]
    display_name: NotRequired[str]  # copied to an empty profile name
    avatar_url: NotRequired[str]  # copied to an empty profile image
    claims: NotRequired[dict]


class AuthAdapter(Protocol):
    """Turns bearer tokens into principals for one auth provider."""

    async def verify_token(self, token: str) -> Principal:
        """Return the principal for ``token``; raise ``AuthenticationError`` if it is rejected."""
        ...

    async def issue_token(self, subject: str | None = None, claims: dict | None = None) -> str:
        """Mint a token for ``subject``, used by the ``issue-token`` CLI command."""
        ...


class AuthenticationError(Exception):
    """A bearer token was missing, malformed, expired or signed by someone else."""
