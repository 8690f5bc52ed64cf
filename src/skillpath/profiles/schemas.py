"""Pydantic response models for the full-profile endpoint."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ProfileSummary(BaseModel):
    role: str | None = None
    career_goal: str | None = None
    bio: str | None = None
    experience_level: str | None = None


class UserSummary(BaseModel):
    name: str | None
    email: str
    profile_picture_url: str | None = None
    xp: int
    level: int
    streak: int
    join_date: datetime
    profile: ProfileSummary | None = None


class SkillResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    skill_name: str
    category: str
    score: int
    level: str


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    activity_type: str
    title: str
    xp_earned: int
    skill_tag: str | None = None
    duration_minutes: int | None = None
    timestamp: datetime


class BadgeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    icon: str | None = None
    awarded_at: datetime


class StatsResponse(BaseModel):
    total_learning_hours: int
    courses_completed: int
    labs_completed: int


class CareerReadinessResponse(BaseModel):
    score: int
    missing_skills: list[str]
    target_role: str
    readiness_level: str


class FullProfileResponse(BaseModel):
    user: UserSummary
    skills: list[SkillResponse]
    recent_activity: list[ActivityResponse]
    badges: list[BadgeResponse]
    career_readiness: CareerReadinessResponse
    stats: StatsResponse
