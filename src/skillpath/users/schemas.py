"""Request/response schemas for user endpoints."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from skillpath.skills.service import MAX_SKILL_NAME_LENGTH
from skillpath.users.service import ProfileChanges

TechName = Annotated[str, Field(max_length=MAX_SKILL_NAME_LENGTH)]


class ProfileUpdateRequest(BaseModel):
    """Partial profile update. Omitted or null fields are left untouched."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(None, max_length=128)
    profile_picture_url: str | None = Field(None, alias="profilePictureUrl")
    role: str | None = Field(None, max_length=128)
    experience_level: str | None = Field(None, alias="experienceLevel", max_length=64)
    career_goal: str | None = Field(None, alias="careerGoal", max_length=256)
    bio: str | None = Field(None, max_length=1000)
    learning_style: str | None = Field(None, alias="learningStyle", max_length=128)
    current_project: str | None = Field(None, alias="currentProject", max_length=256)
    aspiration: str | None = Field(None, max_length=256)
    preferred_tech: list[TechName] | None = Field(None, alias="preferredTech")

    def to_changes(self) -> ProfileChanges:
        return ProfileChanges(**self.model_dump())


class StatusResponse(BaseModel):
    status: str
