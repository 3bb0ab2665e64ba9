from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import strawberry
from graphql import GraphQLError

from ...logging import get_logger
from ...services.errors import ErrorKind
from ...storage.images import remove_image, store_image_and_get_url
from ..errors import graphql_error, profile_not_found_error, to_graphql_error

if TYPE_CHECKING:
    from strawberry.file_uploads import Upload

    from ...database.models import MemberRole, Servers
    from ...services.base import ServerService
    from ..mutations.root import (
        CreateChannelOnServerInput,
        CreateServerInput,
        UpdateServerInput,
    )

logger = get_logger(__name__)

LEAVE_SERVER_OK = "OK"


def get_profile_email(info: strawberry.Info) -> str | None:
    """Identity attached to the request by the auth dependency."""
    auth = info.context.get("auth")
    return auth.email if auth is not None else None


def get_server_service(info: strawberry.Info) -> ServerService:
    return info.context["server_service"]


def _require_profile_email(info: strawberry.Info) -> str:
    email = get_profile_email(info)
    if not email:
        logger.info("Profile missing for mutation", field=info.field_name)
        raise profile_not_found_error()
    return email


def _discard_image(image_url: str | None) -> None:
    """Remove an image stored for a mutation whose service call failed."""
    if image_url is None:
        return
    try:
        remove_image(image_url)
    except OSError as e:
        logger.warning("Failed to remove orphaned image", image_url=image_url, error=str(e))


# Query resolvers
async def resolve_servers(info: strawberry.Info) -> Sequence[Servers] | GraphQLError:
    """
    Resolve every server the caller is a member of.

    A missing identity is returned as an error value instead of raised.
    """
    email = get_profile_email(info)
    if not email:
        return profile_not_found_error()

    try:
        return await get_server_service(info).get_servers_by_profile_email_of_member(email)
    except Exception as e:
        raise to_graphql_error(e) from e


async def resolve_server(info: strawberry.Info, id: int | None) -> Servers | GraphQLError:
    """Resolve a single server the caller is a member of."""
    email = get_profile_email(info)
    if not email:
        return profile_not_found_error()

    try:
        return await get_server_service(info).get_server(id, email)
    except Exception as e:
        raise to_graphql_error(e) from e


# Mutation resolvers
async def create_server(
    info: strawberry.Info, input: CreateServerInput, file: Upload | None
) -> Servers:
    if not file:
        raise graphql_error("Image is required", ErrorKind.VALIDATION)

    email = _require_profile_email(info)
    image_url = None
    try:
        image_url = await store_image_and_get_url(file)
        return await get_server_service(info).create_server(input, image_url, email)
    except Exception as e:
        _discard_image(image_url)
        raise to_graphql_error(e) from e


async def update_server(
    info: strawberry.Info, input: UpdateServerInput, file: Upload | None
) -> Servers:
    email = _require_profile_email(info)
    image_url = None
    try:
        if file:
            image_url = await store_image_and_get_url(file)
        return await get_server_service(info).update_server(input, image_url, email)
    except Exception as e:
        _discard_image(image_url)
        raise to_graphql_error(e) from e


async def update_server_with_new_invite_code(
    info: strawberry.Info, server_id: int | None
) -> Servers:
    if not server_id:
        raise graphql_error("Server id is required", ErrorKind.VALIDATION)

    email = _require_profile_email(info)
    try:
        return await get_server_service(info).update_server_with_new_invite_code(server_id, email)
    except Exception as e:
        raise to_graphql_error(e) from e


async def create_channel(info: strawberry.Info, input: CreateChannelOnServerInput) -> Servers:
    email = _require_profile_email(info)
    try:
        return await get_server_service(info).create_channel(input, email)
    except Exception as e:
        raise to_graphql_error(e) from e


async def leave_server(info: strawberry.Info, server_id: int | None) -> str:
    email = _require_profile_email(info)
    try:
        await get_server_service(info).leave_server(server_id, email)
        return LEAVE_SERVER_OK
    except Exception as e:
        raise to_graphql_error(e) from e


async def delete_server(info: strawberry.Info, server_id: int | None) -> str:
    email = _require_profile_email(info)
    try:
        return await get_server_service(info).delete_server(server_id, email)
    except Exception as e:
        raise to_graphql_error(e) from e


async def delete_channel_from_server(info: strawberry.Info, channel_id: int | None) -> str:
    email = _require_profile_email(info)
    try:
        return await get_server_service(info).delete_channel_from_server(channel_id, email)
    except Exception as e:
        raise to_graphql_error(e) from e


async def add_member_to_server(info: strawberry.Info, invite_code: str) -> Servers:
    email = _require_profile_email(info)
    try:
        return await get_server_service(info).add_member_to_server(invite_code, email)
    except Exception as e:
        raise to_graphql_error(e) from e


async def change_member_role(
    info: strawberry.Info, member_id: int | None, role: MemberRole
) -> Servers:
    email = _require_profile_email(info)
    try:
        return await get_server_service(info).change_member_role(member_id, role, email)
    except Exception as e:
        raise to_graphql_error(e) from e


async def delete_member(info: strawberry.Info, member_id: int | None) -> Servers:
    email = _require_profile_email(info)
    try:
        return await get_server_service(info).delete_member(member_id, email)
    except Exception as e:
        raise to_graphql_error(e) from e
