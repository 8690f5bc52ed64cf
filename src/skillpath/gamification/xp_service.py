"""Activity logging: append to the ledger and grant XP with level-up detection."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select, update
from sqlalchemy.orm.attributes import set_committed_value

from skillpath.auth.service import require_user_by_email
from skillpath.db.models import ActivityLog, User
from skillpath.gamification.levels import compute_level

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


async def grant_xp(db: AsyncSession, user: User, amount: int, now: datetime) -> int:
    """Add ``amount`` to the user's XP in SQL and raise the level if it grew.

    The increment is a single ``UPDATE users SET xp = xp + :amount`` so two
    concurrent grants for the same user cannot overwrite each other. The
    level update is guarded by ``level < :new`` so it never moves down.

    Returns the new XP total.
    """
    await db.execute(
        update(User)
        .where(User.id == user.id)
        .values(xp=User.xp + amount, last_active=now)
        .execution_options(synchronize_session=False)
    )
    new_xp = (await db.execute(select(User.xp).where(User.id == user.id))).scalar_one()
    set_committed_value(user, "xp", new_xp)
    set_committed_value(user, "last_active", now)

    old_level = user.level
    new_level = compute_level(new_xp)
    if new_level > old_level:
        await db.execute(
            update(User)
            .where(User.id == user.id, User.level < new_level)
            .values(level=new_level)
            .execution_options(synchronize_session=False)
        )
        set_committed_value(user, "level", new_level)
        logger.info("level_up", user_id=user.id, old_level=old_level, new_level=new_level)

    return new_xp


async def log_activity(
    db: AsyncSession,
    user_email: str,
    activity_type: str,
    title: str,
    xp: int,
    skill_tag: str | None = None,
    duration_minutes: int | None = None,
    now: datetime | None = None,
) -> int:
    """Record a learning event for the acting user and grant its XP.

    The ledger insert and the XP/level update share the caller's transaction;
    the router commits both together.

    Raises:
        NotFoundError: If ``user_email`` does not resolve to a user.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    user = await require_user_by_email(db, user_email)

    entry = ActivityLog(
        user_id=user.id,
        activity_type=activity_type,
        title=title,
        xp_earned=xp,
        skill_tag=skill_tag,
        duration_minutes=duration_minutes if duration_minutes is not None else 0,
        timestamp=now,
    )
    db.add(entry)
    await db.flush()

    new_xp = await grant_xp(db, user, xp, now)
    logger.info(
        "activity_logged",
        user_id=user.id,
        activity_type=activity_type,
        xp_earned=xp,
        new_xp=new_xp,
    )
    return new_xp
