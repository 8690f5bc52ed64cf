"""Request/response schemas for activity logging."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

MAX_XP_PER_ACTIVITY = 100_000


class ActivityRequest(BaseModel):
    """One learning event reported by the client."""

    model_config = ConfigDict(populate_by_name=True)

    activity_type: str = Field(..., alias="type", min_length=1, max_length=32)
    title: str = Field(..., min_length=1, max_length=256)
    xp: int = Field(..., ge=0, le=MAX_XP_PER_ACTIVITY)
    skill_tag: str | None = Field(None, alias="skillTag", max_length=128)
    duration_minutes: int | None = Field(None, alias="durationMinutes", ge=0)


class ActivityLoggedResponse(BaseModel):
    status: str = "logged"
    new_xp: int
