"""
Server GraphQL type definitions

Resolvers return ORM rows directly; fields resolve by attribute name.
"""

from datetime import datetime

import strawberry

from ...database import models

MemberRole = strawberry.enum(models.MemberRole, description="Role of a member within a server")
ChannelType = strawberry.enum(models.ChannelType, description="Kind of channel on a server")


@strawberry.type
class Profile:
    """Profile type for GraphQL API."""

    id: int
    email: str
    name: str | None
    image_url: str | None


@strawberry.type
class Channel:
    """Channel type for GraphQL API."""

    id: int
    name: str
    type: ChannelType
    profile_id: int
    server_id: int
    created_at: datetime
    updated_at: datetime


@strawberry.type
class Member:
    """Server member type for GraphQL API."""

    id: int
    role: MemberRole
    profile_id: int
    server_id: int
    created_at: datetime
    updated_at: datetime
    profile: Profile


@strawberry.type
class Server:
    """Server type for GraphQL API."""

    id: int
    name: str
    image_url: str
    invite_code: str
    profile_id: int
    created_at: datetime
    updated_at: datetime
    profile: Profile
    members: list[Member]
    channels: list[Channel]
