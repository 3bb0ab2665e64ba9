"""Server service interface consumed by the GraphQL resolvers."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..database.models import MemberRole, Servers
    from ..graphql.mutations.root import (
        CreateChannelOnServerInput,
        CreateServerInput,
        UpdateServerInput,
    )


class ServerService(Protocol):
    """Domain operations for servers, channels, invites and members.

    Every operation that acts on behalf of a caller takes the caller's
    profile email. Implementations raise ``ServiceError`` subclasses
    (see ``services.errors``) to signal validation, not-found and
    permission failures.
    """

    async def get_servers_by_profile_email_of_member(self, email: str) -> Sequence[Servers]:
        """Return every server the profile is a member of."""
        ...

    async def get_server(self, server_id: int | None, email: str) -> Servers:
        """Return a server the profile is a member of."""
        ...

    async def create_server(
        self, input: CreateServerInput, image_url: str, email: str
    ) -> Servers:
        """Create a server owned by the profile."""
        ...

    async def update_server(
        self, input: UpdateServerInput, image_url: str | None, email: str
    ) -> Servers:
        """Update a server; a ``None`` image_url keeps the current image."""
        ...

    async def update_server_with_new_invite_code(self, server_id: int, email: str) -> Servers:
        """Replace the server's invite code."""
        ...

    async def create_channel(self, input: CreateChannelOnServerInput, email: str) -> Servers:
        """Add a channel to a server and return the server."""
        ...

    async def leave_server(self, server_id: int | None, email: str) -> None:
        """Remove the profile's membership from a server."""
        ...

    async def delete_server(self, server_id: int | None, email: str) -> str:
        """Delete a server owned by the profile."""
        ...

    async def delete_channel_from_server(self, channel_id: int | None, email: str) -> str:
        """Delete a channel."""
        ...

    async def add_member_to_server(self, invite_code: str, email: str) -> Servers:
        """Join the server identified by an invite code."""
        ...

    async def change_member_role(
        self, member_id: int | None, role: MemberRole, email: str
    ) -> Servers:
        """Change another member's role."""
        ...

    async def delete_member(self, member_id: int | None, email: str) -> Servers:
        """Remove another member from a server."""
        ...
