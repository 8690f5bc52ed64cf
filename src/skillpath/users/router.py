"""User management router: /api/v1/users/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from skillpath.auth.dependencies import get_current_email
from skillpath.database import get_session
from skillpath.exceptions import NotFoundError
from skillpath.users.schemas import ProfileUpdateRequest, StatusResponse
from skillpath.users.service import update_profile

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.put("/profile", response_model=StatusResponse)
async def update_my_profile(
    body: ProfileUpdateRequest,
    email: str = Depends(get_current_email),
    db: AsyncSession = Depends(get_session),
) -> StatusResponse:
    """Partially update name, avatar and profile fields; new preferred technologies gain skills."""
    try:
        await update_profile(db, email, body.to_changes())
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    await db.commit()
    return StatusResponse(status="success")
