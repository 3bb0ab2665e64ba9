"""Profile provisioning and lookup."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models import Profiles
from ..logging import get_logger
from .adapters.base import Principal

logger = get_logger(__name__)


async def ensure_profile(db: AsyncSession, principal: Principal) -> int | None:
    """
    Ensure a local profile exists for the principal's email (JIT provisioning).

    Principals without an email have no profile; None is returned.
    Existing profiles only have empty name/image fields filled in.
    """
    email = principal.get("email")
    if not email:
        return None

    profile = await get_profile_by_email(db, email)

    if profile:
        updated = False

        display_name = principal.get("display_name")
        if display_name and not profile.name:
            profile.name = display_name
            updated = True

        avatar_url = principal.get("avatar_url")
        if avatar_url and not profile.image_url:
            profile.image_url = avatar_url
            updated = True

        if updated:
            await db.flush()
            logger.info("Updated profile info", profile_id=profile.id)

        return profile.id

    profile = Profiles(
        email=email,
        name=principal.get("display_name"),
        image_url=principal.get("avatar_url"),
    )
    db.add(profile)
    await db.flush()

    logger.info(
        "Created new profile via JIT provisioning",
        profile_id=profile.id,
        provider=principal["provider"],
    )
    return profile.id


async def get_profile_by_email(db: AsyncSession, email: str) -> Profiles | None:
    """Get a profile by email."""
    stmt = select(Profiles).where(Profiles.email == email)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()
