"""
Schema-level tests: field names, permissions and error shapes as seen by clients
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from guildhall.auth.adapters.base import Principal
from guildhall.auth.context import ANONYMOUS, AuthContext
from guildhall.database.models import (
    Channels,
    ChannelType,
    MemberRole,
    Members,
    Profiles,
    Servers,
)
from guildhall.graphql.schema import schema, validate_schema
from guildhall.services.errors import ForbiddenError

EMAIL = "owner@example.com"

SERVERS_QUERY = """
    query {
        getServers {
            id
            name
            imageUrl
            inviteCode
            profileId
            profile { email }
            members { role profile { email } }
            channels { name type }
        }
    }
"""


def make_server() -> Servers:
    now = datetime.now(UTC)
    owner = Profiles(id=1, email=EMAIL, name="Owner", image_url=None)
    return Servers(
        id=10,
        name="Guild",
        image_url="http://localhost:8088/images/u_logo.png",
        invite_code="invite-123",
        profile_id=1,
        created_at=now,
        updated_at=now,
        profile=owner,
        members=[
            Members(
                id=100,
                role=MemberRole.ADMIN,
                profile_id=1,
                server_id=10,
                created_at=now,
                updated_at=now,
                profile=owner,
            )
        ],
        channels=[
            Channels(
                id=1000,
                name="general",
                type=ChannelType.TEXT,
                profile_id=1,
                server_id=10,
                created_at=now,
                updated_at=now,
            )
        ],
    )


def context(auth: AuthContext, service) -> dict:
    return {"request": MagicMock(), "auth": auth, "server_service": service}


def authed(email: str | None = EMAIL) -> AuthContext:
    principal = Principal(provider="jwt", subject="owner")
    if email:
        principal["email"] = email
    return AuthContext(principal=principal, token="test-token")


def test_schema_is_valid():
    validate_schema()


@pytest.mark.asyncio
async def test_get_servers_serializes_rows():
    service = AsyncMock()
    service.get_servers_by_profile_email_of_member.return_value = [make_server()]

    result = await schema.execute(SERVERS_QUERY, context_value=context(authed(), service))

    assert result.errors is None
    assert result.data == {
        "getServers": [
            {
                "id": 10,
                "name": "Guild",
                "imageUrl": "http://localhost:8088/images/u_logo.png",
                "inviteCode": "invite-123",
                "profileId": 1,
                "profile": {"email": EMAIL},
                "members": [{"role": "ADMIN", "profile": {"email": EMAIL}}],
                "channels": [{"name": "general", "type": "TEXT"}],
            }
        ]
    }


@pytest.mark.asyncio
async def test_unauthenticated_request_rejected():
    service = AsyncMock()

    result = await schema.execute(SERVERS_QUERY, context_value=context(ANONYMOUS, service))

    assert result.errors is not None
    assert result.errors[0].message == "Unauthorized"
    assert result.errors[0].extensions["code"] == "UNAUTHENTICATED"
    service.get_servers_by_profile_email_of_member.assert_not_called()


@pytest.mark.asyncio
async def test_missing_profile_reported_as_field_error():
    service = AsyncMock()

    result = await schema.execute(SERVERS_QUERY, context_value=context(authed(None), service))

    assert result.data is None
    assert result.errors[0].message == "Profile not found"
    assert result.errors[0].path == ["getServers"]


@pytest.mark.asyncio
async def test_get_server_by_id():
    service = AsyncMock()
    service.get_server.return_value = make_server()

    result = await schema.execute(
        "query GetServer($id: Int) { getServer(id: $id) { id name } }",
        variable_values={"id": 10},
        context_value=context(authed(), service),
    )

    assert result.errors is None
    assert result.data == {"getServer": {"id": 10, "name": "Guild"}}
    service.get_server.assert_awaited_once_with(10, EMAIL)


@pytest.mark.asyncio
async def test_leave_server_mutation():
    service = AsyncMock()
    service.leave_server.return_value = None

    result = await schema.execute(
        "mutation { leaveServer(serverId: 10) }", context_value=context(authed(), service)
    )

    assert result.errors is None
    assert result.data == {"leaveServer": "OK"}


@pytest.mark.asyncio
async def test_service_error_extensions():
    service = AsyncMock()
    service.delete_server.side_effect = ForbiddenError(
        "Only the server owner can delete the server"
    )

    result = await schema.execute(
        "mutation { deleteServer(serverId: 10) }", context_value=context(authed(), service)
    )

    assert result.errors[0].message == "Only the server owner can delete the server"
    assert result.errors[0].extensions == {"code": "FORBIDDEN", "status": 403}


@pytest.mark.asyncio
async def test_create_server_with_upload():
    service = AsyncMock()
    service.create_server.return_value = make_server()
    upload = MagicMock()
    upload.filename = "logo.png"

    with patch(
        "guildhall.graphql.resolvers.server.store_image_and_get_url", new_callable=AsyncMock
    ) as store:
        store.return_value = "http://localhost:8088/images/u_logo.png"
        result = await schema.execute(
            """
            mutation Create($input: CreateServerInput!, $file: Upload) {
                createServer(input: $input, file: $file) { id inviteCode }
            }
            """,
            variable_values={"input": {"name": "Guild"}, "file": upload},
            context_value=context(authed(), service),
        )

    assert result.errors is None
    assert result.data == {"createServer": {"id": 10, "inviteCode": "invite-123"}}
    input, image_url, email = service.create_server.await_args.args
    assert input.name == "Guild"
    assert image_url == "http://localhost:8088/images/u_logo.png"
    assert email == EMAIL


@pytest.mark.asyncio
async def test_create_server_without_file():
    service = AsyncMock()

    result = await schema.execute(
        'mutation { createServer(input: {name: "Guild"}) { id } }',
        context_value=context(authed(), service),
    )

    assert result.errors[0].message == "Image is required"
    assert result.errors[0].extensions == {"code": "VALIDATION", "status": 400}
    service.create_server.assert_not_called()


@pytest.mark.asyncio
async def test_create_channel_and_change_role_inputs():
    service = AsyncMock()
    service.create_channel.return_value = make_server()
    service.change_member_role.return_value = make_server()

    result = await schema.execute(
        """
        mutation {
            createChannel(input: {serverId: 10, name: "voice", type: AUDIO}) { id }
            changeMemberRole(memberId: 100, role: MODERATOR) { id }
        }
        """,
        context_value=context(authed(), service),
    )

    assert result.errors is None
    channel_input, email = service.create_channel.await_args.args
    assert (channel_input.server_id, channel_input.name) == (10, "voice")
    assert channel_input.type == ChannelType.AUDIO
    service.change_member_role.assert_awaited_once_with(100, MemberRole.MODERATOR, EMAIL)
