"""User management business logic: partial profile updates."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from skillpath.auth.service import require_user_by_email
from skillpath.db.models import Profile, User
from skillpath.skills.service import sync_skills_from_profile

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


@dataclass
class ProfileChanges:
    """Partial update. ``None`` means "leave untouched"; empty strings and lists do overwrite."""

    name: str | None = None
    profile_picture_url: str | None = None
    role: str | None = None
    experience_level: str | None = None
    career_goal: str | None = None
    preferred_tech: list[str] | None = None
    learning_style: str | None = None
    current_project: str | None = None
    aspiration: str | None = None
    bio: str | None = None


# ProfileChanges fields copied straight onto the Profile row.
PROFILE_FIELDS: tuple[str, ...] = (
    "role",
    "experience_level",
    "career_goal",
    "preferred_tech",
    "learning_style",
    "current_project",
    "aspiration",
    "bio",
)


async def get_or_create_profile(db: AsyncSession, user: User) -> Profile:
    """Return the user's profile, creating an empty one if needed.

    The insert is ``ON CONFLICT (user_id) DO NOTHING`` so two concurrent
    callers end up sharing the same row.
    """
    result = await db.execute(select(Profile).where(Profile.user_id == user.id))
    profile = result.scalar_one_or_none()
    if profile is not None:
        return profile

    insert = sqlite_insert if db.get_bind().dialect.name == "sqlite" else pg_insert
    await db.execute(insert(Profile).values(user_id=user.id).on_conflict_do_nothing(index_elements=["user_id"]))
    result = await db.execute(select(Profile).where(Profile.user_id == user.id))
    return result.scalar_one()


async def update_profile(
    db: AsyncSession,
    user_email: str,
    changes: ProfileChanges,
) -> User:
    """
    Apply a partial update to the user and their profile, then sync skills.

    Name is only overwritten when non-blank. All other fields are overwritten
    whenever they are not None.

    Raises:
        NotFoundError: If ``user_email`` does not resolve to a user.
    """
    user = await require_user_by_email(db, user_email)

    if changes.name is not None and changes.name.strip():
        user.full_name = changes.name
    if changes.profile_picture_url is not None:
        user.profile_picture_url = changes.profile_picture_url

    profile = await get_or_create_profile(db, user)
    for field in PROFILE_FIELDS:
        value = getattr(changes, field)
        if value is not None:
            setattr(profile, field, list(value) if field == "preferred_tech" else value)

    await db.flush()

    added = await sync_skills_from_profile(db, user)
    logger.info(
        "profile_updated",
        user_id=user.id,
        fields=[f.name for f in fields(changes) if getattr(changes, f.name) is not None],
        skills_added=len(added),
    )
    return user
