"""SQLAlchemy-backed implementation of the server service."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..database.connection import get_async_session
from ..database.models import Channels, ChannelType, MemberRole, Members, Profiles, Servers
from ..logging import get_logger
from .errors import ForbiddenError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from ..graphql.mutations.root import (
        CreateChannelOnServerInput,
        CreateServerInput,
        UpdateServerInput,
    )

logger = get_logger(__name__)

DEFAULT_CHANNEL_NAME = "general"

SERVER_DELETED = "Server deleted successfully"
CHANNEL_DELETED = "Channel deleted successfully"

_MANAGER_ROLES = frozenset({MemberRole.ADMIN, MemberRole.MODERATOR})
_ADMIN_ROLES = frozenset({MemberRole.ADMIN})


def _server_load_options():
    return (
        selectinload(Servers.profile),
        selectinload(Servers.members).selectinload(Members.profile),
        selectinload(Servers.channels),
    )


def new_invite_code() -> str:
    return str(uuid4())


async def _get_profile(session: AsyncSession, email: str) -> Profiles:
    stmt = select(Profiles).where(Profiles.email == email)
    profile = (await session.execute(stmt)).scalar_one_or_none()
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


async def _load_server(session: AsyncSession, server_id: int) -> Servers | None:
    stmt = (
        select(Servers)
        .where(Servers.id == server_id)
        .options(*_server_load_options())
        .execution_options(populate_existing=True)
    )
    return (await session.execute(stmt)).scalar_one_or_none()


async def _require_server(session: AsyncSession, server_id: int | None) -> Servers:
    if server_id is None:
        raise ValidationError("Server id is required")
    server = await _load_server(session, server_id)
    if server is None:
        raise NotFoundError("Server not found")
    return server


def _require_member(
    server: Servers, profile: Profiles, roles: frozenset[MemberRole] | None = None
) -> Members:
    """Return the caller's membership, enforcing ``roles`` when given.

    Non-members get the same answer as for a missing server.
    """
    member = next((m for m in server.members if m.profile_id == profile.id), None)
    if member is None:
        raise NotFoundError("Server not found")
    if roles is not None and member.role not in roles:
        raise ForbiddenError("You do not have permission to perform this action")
    return member


async def _require_target_member(session: AsyncSession, member_id: int | None) -> Members:
    if member_id is None:
        raise ValidationError("Member id is required")
    member = await session.get(Members, member_id)
    if member is None:
        raise NotFoundError("Member not found")
    return member


class SqlServerService:
    """Server service storing profiles, servers, members and channels via SQLAlchemy."""

    async def get_servers_by_profile_email_of_member(self, email: str) -> Sequence[Servers]:
        async with get_async_session() as session:
            stmt = (
                select(Servers)
                .join(Servers.members)
                .join(Members.profile)
                .where(Profiles.email == email)
                .options(*_server_load_options())
                .order_by(Servers.created_at, Servers.id)
            )
            result = await session.execute(stmt)
            return result.scalars().all()

    async def get_server(self, server_id: int | None, email: str) -> Servers:
        if server_id is None:
            raise ValidationError("Server id is required")

        async with get_async_session() as session:
            stmt = (
                select(Servers)
                .join(Servers.members)
                .join(Members.profile)
                .where(Servers.id == server_id, Profiles.email == email)
                .options(*_server_load_options())
            )
            server = (await session.execute(stmt)).scalar_one_or_none()
            if server is None:
                raise NotFoundError("Server not found")
            return server

    async def create_server(
        self, input: CreateServerInput, image_url: str, email: str
    ) -> Servers:
        name = (input.name or "").strip()
        if not name:
            raise ValidationError("Server name is required")

        async with get_async_session() as session:
            profile = await _get_profile(session, email)

            server = Servers(
                name=name,
                image_url=image_url,
                invite_code=new_invite_code(),
                profile_id=profile.id,
            )
            server.channels.append(
                Channels(name=DEFAULT_CHANNEL_NAME, type=ChannelType.TEXT, profile_id=profile.id)
            )
            server.members.append(Members(role=MemberRole.ADMIN, profile_id=profile.id))
            session.add(server)
            await session.flush()

            logger.info("Server created", server_id=server.id, profile_id=profile.id)
            return await _require_server(session, server.id)

    async def update_server(
        self, input: UpdateServerInput, image_url: str | None, email: str
    ) -> Servers:
        async with get_async_session() as session:
            profile = await _get_profile(session, email)
            server = await _require_server(session, input.server_id)
            _require_member(server, profile, _ADMIN_ROLES)

            if input.name is not None:
                name = input.name.strip()
                if not name:
                    raise ValidationError("Server name cannot be empty")
                server.name = name
            if image_url is not None:
                server.image_url = image_url

            await session.flush()
            logger.info("Server updated", server_id=server.id, image_changed=image_url is not None)
            return await _require_server(session, server.id)

    async def update_server_with_new_invite_code(self, server_id: int, email: str) -> Servers:
        async with get_async_session() as session:
            profile = await _get_profile(session, email)
            server = await _require_server(session, server_id)
            _require_member(server, profile, _MANAGER_ROLES)

            server.invite_code = new_invite_code()
            await session.flush()

            logger.info("Invite code regenerated", server_id=server.id)
            return await _require_server(session, server.id)

    async def create_channel(self, input: CreateChannelOnServerInput, email: str) -> Servers:
        name = (input.name or "").strip()
        if not name:
            raise ValidationError("Channel name is required")
        if name.lower() == DEFAULT_CHANNEL_NAME:
            raise ValidationError(f'Channel name cannot be "{DEFAULT_CHANNEL_NAME}"')

        async with get_async_session() as session:
            profile = await _get_profile(session, email)
            server = await _require_server(session, input.server_id)
            _require_member(server, profile, _MANAGER_ROLES)

            server.channels.append(
                Channels(name=name, type=input.type or ChannelType.TEXT, profile_id=profile.id)
            )
            await session.flush()

            logger.info("Channel created", server_id=server.id, channel_name=name)
            return await _require_server(session, server.id)

    async def leave_server(self, server_id: int | None, email: str) -> None:
        async with get_async_session() as session:
            profile = await _get_profile(session, email)
            server = await _require_server(session, server_id)

            if server.profile_id == profile.id:
                raise ForbiddenError("The server owner cannot leave the server")

            member = _require_member(server, profile)
            await session.delete(member)
            logger.info("Member left server", server_id=server.id, profile_id=profile.id)

    async def delete_server(self, server_id: int | None, email: str) -> str:
        async with get_async_session() as session:
            profile = await _get_profile(session, email)
            server = await _require_server(session, server_id)

            if server.profile_id != profile.id:
                raise ForbiddenError("Only the server owner can delete the server")

            await session.delete(server)
            logger.info("Server deleted", server_id=server_id, profile_id=profile.id)
            return SERVER_DELETED

    async def delete_channel_from_server(self, channel_id: int | None, email: str) -> str:
        if channel_id is None:
            raise ValidationError("Channel id is required")

        async with get_async_session() as session:
            profile = await _get_profile(session, email)
            channel = await session.get(Channels, channel_id)
            if channel is None:
                raise NotFoundError("Channel not found")

            server = await _require_server(session, channel.server_id)
            _require_member(server, profile, _MANAGER_ROLES)

            if channel.name == DEFAULT_CHANNEL_NAME:
                raise ValidationError(f'The "{DEFAULT_CHANNEL_NAME}" channel cannot be deleted')

            await session.delete(channel)
            logger.info("Channel deleted", server_id=server.id, channel_id=channel_id)
            return CHANNEL_DELETED

    async def add_member_to_server(self, invite_code: str, email: str) -> Servers:
        if not invite_code:
            raise ValidationError("Invite code is required")

        async with get_async_session() as session:
            profile = await _get_profile(session, email)
            stmt = (
                select(Servers)
                .where(Servers.invite_code == invite_code)
                .options(*_server_load_options())
            )
            server = (await session.execute(stmt)).scalar_one_or_none()
            if server is None:
                raise NotFoundError("Server not found")

            if any(m.profile_id == profile.id for m in server.members):
                return server

            server.members.append(Members(role=MemberRole.GUEST, profile_id=profile.id))
            await session.flush()

            logger.info("Member joined server", server_id=server.id, profile_id=profile.id)
            return await _require_server(session, server.id)

    async def change_member_role(
        self, member_id: int | None, role: MemberRole, email: str
    ) -> Servers:
        async with get_async_session() as session:
            profile = await _get_profile(session, email)
            member = await _require_target_member(session, member_id)
            server = await _require_server(session, member.server_id)
            _require_member(server, profile, _ADMIN_ROLES)

            if member.profile_id == profile.id:
                raise ForbiddenError("You cannot change your own role")
            if member.profile_id == server.profile_id:
                raise ForbiddenError("The server owner's role cannot be changed")

            member.role = role
            await session.flush()

            logger.info(
                "Member role changed", server_id=server.id, member_id=member.id, role=role.value
            )
            return await _require_server(session, server.id)

    async def delete_member(self, member_id: int | None, email: str) -> Servers:
        async with get_async_session() as session:
            profile = await _get_profile(session, email)
            member = await _require_target_member(session, member_id)
            server = await _require_server(session, member.server_id)
            _require_member(server, profile, _ADMIN_ROLES)

            if member.profile_id == profile.id:
                raise ForbiddenError("You cannot remove yourself from the server")
            if member.profile_id == server.profile_id:
                raise ForbiddenError("The server owner cannot be removed")

            await session.delete(member)
            await session.flush()

            logger.info("Member removed", server_id=server.id, member_id=member_id)
            return await _require_server(session, server.id)
