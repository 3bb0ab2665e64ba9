"""
Root GraphQL mutation definitions
"""

import strawberry
from strawberry.file_uploads import Upload

from ..permissions import IsAuthenticated
from ..types.server import ChannelType, MemberRole, Server


# Input types for mutations
@strawberry.input
class CreateServerInput:
    """Input for creating a new server."""

    name: str


@strawberry.input
class UpdateServerInput:
    """Input for updating a server."""

    server_id: int
    name: str | None = None


@strawberry.input
class CreateChannelOnServerInput:
    """Input for creating a channel on a server."""

    server_id: int
    name: str
    type: ChannelType = ChannelType.TEXT


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # Server mutations
    @strawberry.mutation(name="createServer", permission_classes=[IsAuthenticated])
    async def create_server(
        self, info: strawberry.Info, input: CreateServerInput, file: Upload | None = None
    ) -> Server:
        """Create a new server with an uploaded image."""
        from ..resolvers.server import create_server

        return await create_server(info, input, file)  # type: ignore[return-value]

    @strawberry.mutation(name="updateServer", permission_classes=[IsAuthenticated])
    async def update_server(
        self, info: strawberry.Info, input: UpdateServerInput, file: Upload | None = None
    ) -> Server:
        """Update a server, optionally replacing its image."""
        from ..resolvers.server import update_server

        return await update_server(info, input, file)  # type: ignore[return-value]

    @strawberry.mutation(
        name="updateServerWithNewInviteCode", permission_classes=[IsAuthenticated]
    )
    async def update_server_with_new_invite_code(
        self, info: strawberry.Info, server_id: int | None = None
    ) -> Server:
        """Regenerate a server's invite code."""
        from ..resolvers.server import update_server_with_new_invite_code

        return await update_server_with_new_invite_code(info, server_id)  # type: ignore[return-value]

    @strawberry.mutation(name="leaveServer", permission_classes=[IsAuthenticated])
    async def leave_server(self, info: strawberry.Info, server_id: int | None = None) -> str:
        """Leave a server."""
        from ..resolvers.server import leave_server

        return await leave_server(info, server_id)

    @strawberry.mutation(name="deleteServer", permission_classes=[IsAuthenticated])
    async def delete_server(self, info: strawberry.Info, server_id: int | None = None) -> str:
        """Delete a server."""
        from ..resolvers.server import delete_server

        return await delete_server(info, server_id)

    # Channel mutations
    @strawberry.mutation(name="createChannel", permission_classes=[IsAuthenticated])
    async def create_channel(
        self, info: strawberry.Info, input: CreateChannelOnServerInput
    ) -> Server:
        """Create a channel on a server."""
        from ..resolvers.server import create_channel

        return await create_channel(info, input)  # type: ignore[return-value]

    @strawberry.mutation(name="deleteChannelFromServer", permission_classes=[IsAuthenticated])
    async def delete_channel_from_server(
        self, info: strawberry.Info, channel_id: int | None = None
    ) -> str:
        """Delete a channel from its server."""
        from ..resolvers.server import delete_channel_from_server

        return await delete_channel_from_server(info, channel_id)

    # Member mutations
    @strawberry.mutation(name="addMemberToServer", permission_classes=[IsAuthenticated])
    async def add_member_to_server(self, info: strawberry.Info, invite_code: str) -> Server:
        """Join a server through its invite code."""
        from ..resolvers.server import add_member_to_server

        return await add_member_to_server(info, invite_code)  # type: ignore[return-value]

    @strawberry.mutation(name="changeMemberRole", permission_classes=[IsAuthenticated])
    async def change_member_role(
        self, info: strawberry.Info, role: MemberRole, member_id: int | None = None
    ) -> Server:
        """Change a member's role."""
        from ..resolvers.server import change_member_role

        return await change_member_role(info, member_id, role)  # type: ignore[return-value]

    @strawberry.mutation(name="deleteMember", permission_classes=[IsAuthenticated])
    async def delete_member(self, info: strawberry.Info, member_id: int | None = None) -> Server:
        """Remove a member from their server."""
        from ..resolvers.server import delete_member

        return await delete_member(info, member_id)  # type: ignore[return-value]
