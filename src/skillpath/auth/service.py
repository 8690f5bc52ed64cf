"""
Authentication business logic.

Handles user lookup, registration, password login, and sign-in through an
external identity provider. Every successful authentication runs the daily
streak bookkeeping.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from skillpath.auth.password import (
    check_needs_rehash,
    hash_password,
    placeholder_password,
    validate_password_strength,
    verify_password,
)
from skillpath.db.models import Profile, User
from skillpath.exceptions import ConflictError, InvalidCredentialsError, NotFoundError
from skillpath.gamification.streak_service import record_daily_activity

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

DEFAULT_BIO = "Ready to accelerate my career!"
DEFAULT_CAREER_GOAL = "Software Engineer"


# ---------------------------------------------------------------------------
# User queries
# ---------------------------------------------------------------------------


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Fetch a user by email (case-insensitive)."""
    result = await db.execute(select(User).where(func.lower(User.email) == normalize_email(email)))
    return result.scalar_one_or_none()


async def require_user_by_email(db: AsyncSession, email: str) -> User:
    """Fetch a user by email or raise NotFoundError."""
    user = await get_user_by_email(db, email)
    if user is None:
        msg = "User not found"
        raise NotFoundError(msg)
    return user


# ---------------------------------------------------------------------------
# User creation
# ---------------------------------------------------------------------------


async def create_user(
    db: AsyncSession,
    email: str,
    full_name: str | None,
    password_hash: str,
    profile_picture_url: str | None = None,
    now: datetime | None = None,
) -> User:
    """
    Insert a fresh user with starting counters and a default profile.

    Raises:
        ConflictError: If the email is taken (including a concurrent insert).
    """
    if now is None:
        now = datetime.now(timezone.utc)

    user = User(
        email=normalize_email(email),
        password_hash=password_hash,
        full_name=full_name,
        profile_picture_url=profile_picture_url,
        xp=0,
        level=1,
        streak=1,
        join_date=now,
        last_active=now,
    )
    user.profile = Profile(bio=DEFAULT_BIO, career_goal=DEFAULT_CAREER_GOAL)
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        msg = "Email already registered"
        raise ConflictError(msg) from e
    return user


async def register_user(
    db: AsyncSession,
    email: str,
    full_name: str | None,
    password: str,
    now: datetime | None = None,
) -> User:
    """
    Register a new user with email + password.

    Raises:
        PasswordStrengthError: If the password is outside the allowed length.
        ConflictError: If the email is already registered.
    """
    validate_password_strength(password)

    existing = await get_user_by_email(db, email)
    if existing is not None:
        msg = "Email already registered"
        raise ConflictError(msg)

    user = await create_user(db, email, full_name, hash_password(password), now=now)
    logger.info("user_registered", user_id=user.id, email=user.email, method="password")
    return user


# ---------------------------------------------------------------------------
# Password login
# ---------------------------------------------------------------------------


async def authenticate_user(
    db: AsyncSession,
    email: str,
    password: str,
    now: datetime | None = None,
) -> User:
    """
    Authenticate with email + password and run streak bookkeeping.

    Raises:
        InvalidCredentialsError: If the email is unknown or the password is wrong.
    """
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        msg = "Incorrect email or password"
        raise InvalidCredentialsError(msg)

    if check_needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        logger.info("password_rehashed", user_id=user.id)

    await record_daily_activity(db, user, now)
    logger.info("login_succeeded", user_id=user.id, method="password")
    return user


# ---------------------------------------------------------------------------
# External identity providers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExternalIdentity:
    """Profile data handed over by an identity provider callback."""

    provider: str
    email: str
    name: str | None = None
    avatar_url: str | None = None


# Canned callback payloads for the simulated redirect flow (no real OAuth keys).
SIMULATED_IDENTITIES: dict[str, ExternalIdentity] = {
    "github": ExternalIdentity(
        provider="github",
        email="dev_student@github.com",
        name="GitHub Developer",
        avatar_url="https://ui-avatars.com/api/?name=GitHub+Dev&background=0D1117&color=fff",
    ),
    "linkedin": ExternalIdentity(
        provider="linkedin",
        email="pro_networker@linkedin.com",
        name="LinkedIn Pro",
        avatar_url="https://ui-avatars.com/api/?name=LinkedIn+Pro&background=0077b5&color=fff",
    ),
    "google": ExternalIdentity(
        provider="google",
        email="google_user@gmail.com",
        name="Google User",
        avatar_url="https://ui-avatars.com/api/?name=Google+User&background=DB4437&color=fff",
    ),
}


def simulated_identity(provider: str) -> ExternalIdentity:
    """Identity returned by the simulated provider callback; unknown providers act as Google."""
    return SIMULATED_IDENTITIES.get(provider.lower(), SIMULATED_IDENTITIES["google"])


async def external_identity_login(
    db: AsyncSession,
    identity: ExternalIdentity,
    now: datetime | None = None,
) -> tuple[User, bool]:
    """
    Sign in (or sign up) a user vouched for by an external provider.

    New users get a hashed random placeholder password, the provider avatar
    and a default profile. Returning users get streak bookkeeping.

    Returns:
        Tuple of (user, created).
    """
    user = await get_user_by_email(db, identity.email)
    if user is not None:
        await record_daily_activity(db, user, now)
        logger.info("login_succeeded", user_id=user.id, method=identity.provider)
        return user, False

    user = await create_user(
        db,
        identity.email,
        identity.name,
        hash_password(placeholder_password()),
        profile_picture_url=identity.avatar_url,
        now=now,
    )
    logger.info("user_registered", user_id=user.id, email=user.email, method=identity.provider)
    return user, True
