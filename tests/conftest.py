"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio


@pytest.fixture(scope="function")
def test_database(tmp_path: Path) -> Generator[str, None, None]:
    """Return the URL of a throwaway SQLite database file."""
    db_path = tmp_path / "guildhall-test.db"
    url = f"sqlite+aiosqlite:///{db_path}"
    os.environ["GUILDHALL_DATABASE_URL"] = url
    yield url


@pytest_asyncio.fixture(scope="function")
async def db(test_database: str) -> AsyncGenerator[str, None]:
    """Point the shared connection pool at the test database and create tables."""
    from guildhall.database.connection import (
        create_all,
        get_async_engine,
        init_database,
        reset_database,
    )

    reset_database()
    init_database(test_database, force_reinit=True)
    await create_all()

    yield test_database

    await get_async_engine().dispose()
    reset_database()


@pytest_asyncio.fixture(scope="function")
async def profiles(db: str) -> dict[str, int]:
    """Seed a handful of profiles, keyed by short name."""
    from guildhall.database.connection import get_async_session
    from guildhall.database.models import Profiles

    seeds = {
        "owner": ("owner@example.com", "Server Owner"),
        "alice": ("alice@example.com", "Alice"),
        "bob": ("bob@example.com", "Bob"),
        "carol": ("carol@example.com", "Carol"),
    }

    ids: dict[str, int] = {}
    async with get_async_session() as session:
        rows = {
            key: Profiles(email=email, name=name) for key, (email, name) in seeds.items()
        }
        session.add_all(rows.values())
        await session.flush()
        ids = {key: row.id for key, row in rows.items()}

    return ids


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "requires_db: mark test as requiring database connection")
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
