"""Full-profile aggregation.

Combines the user summary, recent activity, skills, badges, learning stats
and career readiness into one response. Missing skill rows are backfilled
from the profile's preferred technologies on first read.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import desc, func, select

from skillpath.auth.service import require_user_by_email
from skillpath.config import get_settings
from skillpath.db.models import ActivityLog, Badge, Profile, User, UserSkill
from skillpath.skills.service import get_user_skills, sync_skills_from_profile

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

SKILL_WEIGHT = 0.6
LEVEL_WEIGHT = 2
MAX_READINESS = 100
ADVANCED_CONCEPTS_THRESHOLD = 50
SYSTEM_DESIGN_XP_THRESHOLD = 5000
LAB_ACTIVITY_TYPE = "LAB"


@dataclass
class LearningStats:
    total_learning_hours: int
    courses_completed: int
    labs_completed: int


@dataclass
class CareerReadiness:
    score: int
    readiness_level: str
    target_role: str
    missing_skills: list[str] = field(default_factory=list)


@dataclass
class FullProfile:
    user: User
    profile: Profile | None
    skills: list[UserSkill]
    recent_activity: list[ActivityLog]
    badges: list[Badge]
    stats: LearningStats
    career_readiness: CareerReadiness


# ---------------------------------------------------------------------------
# Pure scoring
# ---------------------------------------------------------------------------


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def activity_minutes(log: ActivityLog) -> int:
    """Logged duration, or an estimate of half the XP when no duration was stored."""
    if log.duration_minutes is not None:
        return log.duration_minutes
    return (log.xp_earned or 0) // 2


def learning_hours(logs: Sequence[ActivityLog]) -> int:
    return sum(activity_minutes(log) for log in logs) // 60


def average_skill_score(skills: Sequence[UserSkill]) -> float:
    if not skills:
        return 0.0
    return sum(s.score for s in skills) / len(skills)


def readiness_level(score: int) -> str:
    if score < 40:
        return "Low"
    if score < 70:
        return "Moderate"
    if score < 90:
        return "High"
    return "Job Ready"


def readiness_score(avg_skill: float, level: int) -> int:
    """Weighted blend of average skill score and level, capped at MAX_READINESS."""
    return min(MAX_READINESS, round_half_up(avg_skill * SKILL_WEIGHT + level * LEVEL_WEIGHT))


def compute_readiness(
    skills: Sequence[UserSkill],
    level: int,
    xp: int,
    career_goal: str | None,
) -> CareerReadiness:
    avg_skill = average_skill_score(skills)
    score = readiness_score(avg_skill, level)

    missing: list[str] = []
    if avg_skill < ADVANCED_CONCEPTS_THRESHOLD:
        missing.append("Advanced Concepts")
    if xp < SYSTEM_DESIGN_XP_THRESHOLD:
        missing.append("System Design")

    return CareerReadiness(
        score=score,
        readiness_level=readiness_level(score),
        target_role=career_goal or get_settings().default_target_role,
        missing_skills=missing,
    )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def get_recent_activity(db: AsyncSession, user_id: int, limit: int) -> list[ActivityLog]:
    result = await db.execute(
        select(ActivityLog)
        .where(ActivityLog.user_id == user_id)
        .order_by(desc(ActivityLog.timestamp), desc(ActivityLog.id))
        .limit(limit)
    )
    return list(result.scalars())


async def count_activity(db: AsyncSession, user_id: int, activity_type: str | None = None) -> int:
    stmt = select(func.count(ActivityLog.id)).where(ActivityLog.user_id == user_id)
    if activity_type is not None:
        stmt = stmt.where(func.upper(ActivityLog.activity_type) == activity_type.upper())
    return int((await db.execute(stmt)).scalar_one())


async def get_badges(db: AsyncSession, user_id: int) -> list[Badge]:
    result = await db.execute(select(Badge).where(Badge.user_id == user_id).order_by(Badge.awarded_at))
    return list(result.scalars())


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


async def get_full_profile(db: AsyncSession, user_email: str) -> FullProfile:
    """
    Assemble the composite profile view for the acting user.

    Raises:
        NotFoundError: If ``user_email`` does not resolve to a user.
    """
    settings = get_settings()
    user = await require_user_by_email(db, user_email)

    skills = await get_user_skills(db, user.id)
    if not skills:
        await sync_skills_from_profile(db, user)
        skills = await get_user_skills(db, user.id)

    profile = (await db.execute(select(Profile).where(Profile.user_id == user.id))).scalar_one_or_none()
    recent = await get_recent_activity(db, user.id, settings.recent_activity_limit)

    stats = LearningStats(
        total_learning_hours=learning_hours(recent),
        courses_completed=await count_activity(db, user.id),
        labs_completed=await count_activity(db, user.id, LAB_ACTIVITY_TYPE),
    )
    readiness = compute_readiness(
        skills,
        level=user.level,
        xp=user.xp,
        career_goal=profile.career_goal if profile else None,
    )

    return FullProfile(
        user=user,
        profile=profile,
        skills=skills,
        recent_activity=recent,
        badges=await get_badges(db, user.id),
        stats=stats,
        career_readiness=readiness,
    )
