"""Activity router: /api/v1/activity/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from skillpath.activity.schemas import ActivityLoggedResponse, ActivityRequest
from skillpath.auth.dependencies import get_current_email
from skillpath.database import get_session
from skillpath.exceptions import NotFoundError
from skillpath.gamification.xp_service import log_activity

router = APIRouter(prefix="/api/v1/activity", tags=["Activity"])


@router.post("/log", response_model=ActivityLoggedResponse)
async def log_activity_endpoint(
    body: ActivityRequest,
    email: str = Depends(get_current_email),
    db: AsyncSession = Depends(get_session),
) -> ActivityLoggedResponse:
    """Append a learning event and add its XP to the user's total."""
    try:
        new_xp = await log_activity(
            db,
            email,
            activity_type=body.activity_type,
            title=body.title,
            xp=body.xp,
            skill_tag=body.skill_tag,
            duration_minutes=body.duration_minutes,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    await db.commit()
    return ActivityLoggedResponse(status="logged", new_xp=new_xp)
