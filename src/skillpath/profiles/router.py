"""Profile router: /api/v1/profile/* endpoints."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from skillpath.auth.dependencies import get_current_email
from skillpath.database import get_session
from skillpath.exceptions import NotFoundError
from skillpath.profiles.schemas import (
    ActivityResponse,
    BadgeResponse,
    CareerReadinessResponse,
    FullProfileResponse,
    ProfileSummary,
    SkillResponse,
    StatsResponse,
    UserSummary,
)
from skillpath.profiles.service import FullProfile, get_full_profile
from skillpath.skills.service import skill_tier

router = APIRouter(prefix="/api/v1/profile", tags=["Profile"])


def _full_profile_response(full: FullProfile) -> FullProfileResponse:
    user = full.user
    profile = full.profile
    return FullProfileResponse(
        user=UserSummary(
            name=user.full_name,
            email=user.email,
            profile_picture_url=user.profile_picture_url,
            xp=user.xp,
            level=user.level,
            streak=user.streak or 0,
            join_date=user.join_date,
            profile=ProfileSummary(
                role=profile.role,
                career_goal=profile.career_goal,
                bio=profile.bio,
                experience_level=profile.experience_level,
            )
            if profile is not None
            else None,
        ),
        skills=[
            SkillResponse(
                id=s.id,
                skill_name=s.skill_name,
                category=s.category,
                score=s.score,
                level=skill_tier(s.score),
            )
            for s in full.skills
        ],
        recent_activity=[ActivityResponse.model_validate(log) for log in full.recent_activity],
        badges=[BadgeResponse.model_validate(b) for b in full.badges],
        career_readiness=CareerReadinessResponse(**asdict(full.career_readiness)),
        stats=StatsResponse(**asdict(full.stats)),
    )


@router.get("/me", response_model=FullProfileResponse)
async def get_my_profile(
    email: str = Depends(get_current_email),
    db: AsyncSession = Depends(get_session),
) -> FullProfileResponse:
    """Full profile: user summary, skills, recent activity, badges, stats and readiness."""
    try:
        full = await get_full_profile(db, email)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    # Persist any skills backfilled during the read.
    await db.commit()
    return _full_profile_response(full)
