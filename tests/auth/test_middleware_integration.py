"""Integration tests for the auth dependency and JIT profile provisioning."""

import os
from unittest.mock import patch

import pytest
from fastapi import HTTPException

from guildhall.auth.adapters.jwt import JWTAuthAdapter
from guildhall.auth.middleware import get_auth_context, get_auth_context_optional
from guildhall.auth.provisioning import get_profile_by_email
from guildhall.database.connection import get_async_session

pytestmark = [pytest.mark.integration, pytest.mark.requires_db]

SECRET = "test-secret"


@pytest.fixture
def jwt_env():
    with patch.dict(
        os.environ,
        {
            "GUILDHALL_AUTH_PROVIDER": "jwt",
            "GUILDHALL_JWT_SECRET": SECRET,
            "GUILDHALL_AUTH_CONFIG": "{}",
        },
    ):
        yield


async def issue(claims: dict, subject: str = "alice") -> str:
    return await JWTAuthAdapter(secret_key=SECRET).issue_token(subject=subject, claims=claims)


@pytest.mark.asyncio
async def test_valid_token_provisions_profile(db, jwt_env):
    token = await issue({"email": "alice@example.com", "name": "Alice"})

    auth = await get_auth_context(f"Bearer {token}")

    assert auth.is_authenticated
    assert auth.email == "alice@example.com"
    assert auth.profile_id is not None

    async with get_async_session() as session:
        profile = await get_profile_by_email(session, "alice@example.com")
    assert profile is not None
    assert profile.id == auth.profile_id
    assert profile.name == "Alice"


@pytest.mark.asyncio
async def test_repeat_login_reuses_profile(db, jwt_env):
    token = await issue({"email": "alice@example.com"})

    first = await get_auth_context(f"Bearer {token}")
    second = await get_auth_context(f"Bearer {token}")

    assert first.profile_id == second.profile_id


@pytest.mark.asyncio
async def test_token_without_email_has_no_profile(db, jwt_env):
    token = await issue({})

    auth = await get_auth_context(f"Bearer {token}")

    assert auth.is_authenticated
    assert auth.email is None
    assert auth.profile_id is None


@pytest.mark.asyncio
async def test_missing_header_is_anonymous(db, jwt_env):
    auth = await get_auth_context(None)
    assert not auth.is_authenticated


@pytest.mark.asyncio
async def test_bad_format_rejected(db, jwt_env):
    with pytest.raises(HTTPException) as exc_info:
        await get_auth_context("Token abc")
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_optional_is_anonymous(db, jwt_env):
    auth = await get_auth_context_optional("Bearer not-a-jwt")
    assert not auth.is_authenticated


@pytest.mark.asyncio
async def test_no_auth_mode_without_header(db):
    with patch.dict(
        os.environ, {"GUILDHALL_AUTH_PROVIDER": "none", "GUILDHALL_AUTH_CONFIG": "{}"}
    ):
        auth = await get_auth_context(None)

    assert auth.provider == "none"
    assert auth.email == "dev@example.com"
    assert auth.profile_id is not None
