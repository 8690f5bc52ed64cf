"""Daily streak bookkeeping, run on every successful authentication."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from skillpath.db.models import User

logger = structlog.get_logger()


def as_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_day(dt: datetime) -> date:
    """Calendar day of ``dt`` in UTC."""
    return as_utc(dt).date()


def calendar_day_delta(last_active: datetime, now: datetime) -> int:
    """Whole calendar days between two instants, ignoring time of day."""
    return (utc_day(now) - utc_day(last_active)).days


def next_streak(current: int | None, last_active: datetime | None, now: datetime) -> int:
    """Streak value after an authentication at ``now``.

    - never active before: 1
    - active yesterday: current + 1 (a null streak counts as 0)
    - gap of two or more days: reset to 1
    - same day: unchanged (a null streak becomes 1)
    """
    if last_active is None:
        return 1
    delta = calendar_day_delta(last_active, now)
    if delta == 1:
        return (current or 0) + 1
    if delta > 1:
        return 1
    return current if current is not None else 1


async def record_daily_activity(
    db: AsyncSession,
    user: User,
    now: datetime | None = None,
) -> int:
    """Apply streak bookkeeping to ``user`` and stamp last_active. Returns the new streak."""
    if now is None:
        now = datetime.now(timezone.utc)

    old_streak = user.streak
    user.streak = next_streak(user.streak, user.last_active, now)
    user.last_active = now
    await db.flush()

    if user.streak != old_streak:
        logger.info("streak_updated", user_id=user.id, old_streak=old_streak, new_streak=user.streak)
    return user.streak
