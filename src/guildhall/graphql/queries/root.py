"""
Root GraphQL query definitions
"""

import strawberry

from ..permissions import IsAuthenticated
from ..types.server import Server


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field(name="getServers", permission_classes=[IsAuthenticated])
    async def get_servers(self, info: strawberry.Info) -> list[Server]:
        """Get servers the current profile is a member of."""
        from ..resolvers.server import resolve_servers

        return await resolve_servers(info)  # type: ignore[return-value]

    @strawberry.field(name="getServer", permission_classes=[IsAuthenticated])
    async def get_server(self, info: strawberry.Info, id: int | None = None) -> Server:
        """Get a server by ID."""
        from ..resolvers.server import resolve_server

        return await resolve_server(info, id)  # type: ignore[return-value]
