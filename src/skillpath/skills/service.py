"""Skill registry: tiers and profile-driven synchronization."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from skillpath.db.models import Profile, User, UserSkill

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

DEFAULT_SKILLS: tuple[str, ...] = ("Communication", "Problem Solving")
SYNCED_SKILL_CATEGORY = "Programming"
SYNCED_SKILL_SCORE = 10
# Width of user_skills.skill_name and user_skills.name_key.
MAX_SKILL_NAME_LENGTH = 128


def skill_tier(score: int) -> str:
    """Tier label for a 0-100 skill score."""
    if score < 30:
        return "Beginner"
    if score < 70:
        return "Intermediate"
    return "Advanced"


def display_name(name: str) -> str:
    """Upper-case the first character only ("python" -> "Python", "sQL" -> "SQL")."""
    return name[:1].upper() + name[1:]


def missing_skill_names(wanted: Iterable[str], existing_keys: set[str]) -> list[str]:
    """Names from ``wanted`` with no case-insensitive match in ``existing_keys``, deduplicated, order kept.

    Names longer than MAX_SKILL_NAME_LENGTH cannot be stored and are skipped.
    """
    seen = set(existing_keys)
    missing: list[str] = []
    for raw in wanted:
        name = (raw or "").strip()
        if not name or len(name) > MAX_SKILL_NAME_LENGTH or name.lower() in seen:
            continue
        seen.add(name.lower())
        missing.append(name)
    return missing


async def get_user_skills(db: AsyncSession, user_id: int) -> list[UserSkill]:
    result = await db.execute(select(UserSkill).where(UserSkill.user_id == user_id).order_by(UserSkill.id))
    return list(result.scalars())


async def _get_profile(db: AsyncSession, user_id: int) -> Profile | None:
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    return result.scalar_one_or_none()


async def _insert_skill_ignore_existing(db: AsyncSession, user_id: int, name: str) -> None:
    """INSERT ... ON CONFLICT (user_id, name_key) DO NOTHING on either backend."""
    insert = sqlite_insert if db.get_bind().dialect.name == "sqlite" else pg_insert
    stmt = insert(UserSkill).values(
        user_id=user_id,
        skill_name=display_name(name),
        name_key=name.lower(),
        category=SYNCED_SKILL_CATEGORY,
        score=SYNCED_SKILL_SCORE,
    )
    await db.execute(stmt.on_conflict_do_nothing(index_elements=["user_id", "name_key"]))


async def sync_skills_from_profile(db: AsyncSession, user: User) -> list[str]:
    """Seed skill rows from the user's preferred technologies.

    No-op without a profile. Falls back to DEFAULT_SKILLS when the preferred
    list is absent or empty. Purely additive: existing skills are never
    updated or removed, and running it twice creates nothing new.

    Returns the names of the skills that were added.
    """
    profile = await _get_profile(db, user.id)
    if profile is None:
        return []

    wanted = profile.preferred_tech or list(DEFAULT_SKILLS)
    existing_keys = {s.name_key for s in await get_user_skills(db, user.id)}
    to_add = missing_skill_names(wanted, existing_keys)

    for name in to_add:
        await _insert_skill_ignore_existing(db, user.id, name)
    if to_add:
        await db.flush()
        logger.info("skills_synced", user_id=user.id, added=[display_name(n) for n in to_add])

    return [display_name(n) for n in to_add]
