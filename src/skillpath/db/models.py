"""ORM models for users and everything they own.

User is the aggregate root. Profile, ActivityLog, UserSkill and Badge rows all
belong to exactly one user and are removed with it.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from skillpath.db.base import Base

# SQLite only autoincrements plain INTEGER primary keys.
_BigId = BigInteger().with_variant(Integer, "sqlite")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """Credentials plus denormalized gamification counters."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(_BigId, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    profile_picture_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # --- Gamification ---
    xp: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, server_default="0")
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")
    streak: Mapped[int | None] = mapped_column(Integer, nullable=True, default=0, server_default="0")
    join_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_active: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # --- Relationships ---
    profile: Mapped[Profile | None] = relationship(
        "Profile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    activity_logs: Mapped[list[ActivityLog]] = relationship(
        "ActivityLog", back_populates="user", cascade="all, delete-orphan"
    )
    skills: Mapped[list[UserSkill]] = relationship("UserSkill", back_populates="user", cascade="all, delete-orphan")
    badges: Mapped[list[Badge]] = relationship("Badge", back_populates="user", cascade="all, delete-orphan")


# Case-insensitive email lookups.
Index("idx_users_email_lower", func.lower(User.email))


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


class Profile(Base):
    """Career-oriented extension of a user. At most one per user."""

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(_BigId, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    role: Mapped[str | None] = mapped_column(String(128), nullable=True)
    experience_level: Mapped[str | None] = mapped_column(String(64), nullable=True)
    career_goal: Mapped[str | None] = mapped_column(String(256), nullable=True)
    bio: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    learning_style: Mapped[str | None] = mapped_column(String(128), nullable=True)
    current_project: Mapped[str | None] = mapped_column(String(256), nullable=True)
    aspiration: Mapped[str | None] = mapped_column(String(256), nullable=True)
    preferred_tech: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)

    user: Mapped[User] = relationship("User", back_populates="profile")


# ---------------------------------------------------------------------------
# Activity ledger
# ---------------------------------------------------------------------------


class ActivityLog(Base):
    """Immutable record of one learning event."""

    __tablename__ = "activity_logs"

    id: Mapped[int] = mapped_column(_BigId, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    activity_type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    xp_earned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    skill_tag: Mapped[str | None] = mapped_column(String(128), nullable=True)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True, default=0)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user: Mapped[User] = relationship("User", back_populates="activity_logs")


# Newest-first ledger reads per user.
Index("ix_activity_logs_user_id_timestamp", ActivityLog.user_id, ActivityLog.timestamp.desc())


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------


class UserSkill(Base):
    """Named capability with a 0-100 score. UNIQUE(user_id, name_key) keeps sync idempotent."""

    __tablename__ = "user_skills"
    __table_args__ = (
        UniqueConstraint("user_id", "name_key", name="user_skills_user_id_name_key_key"),
        CheckConstraint("score BETWEEN 0 AND 100", name="user_skills_score_check"),
    )

    id: Mapped[int] = mapped_column(_BigId, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    skill_name: Mapped[str] = mapped_column(String(128), nullable=False)
    name_key: Mapped[str] = mapped_column(String(128), nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    user: Mapped[User] = relationship("User", back_populates="skills")


# ---------------------------------------------------------------------------
# Badges
# ---------------------------------------------------------------------------


class Badge(Base):
    """Achievement awarded to a user."""

    __tablename__ = "badges"

    id: Mapped[int] = mapped_column(_BigId, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(256), nullable=True)
    awarded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user: Mapped[User] = relationship("User", back_populates="badges")
