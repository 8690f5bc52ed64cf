"""Authentication router for /api/v1/auth/* endpoints."""

from __future__ import annotations

from urllib.parse import urlencode

import structlog
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from skillpath.auth.jwt import create_access_token
from skillpath.auth.password import PasswordStrengthError
from skillpath.auth.schemas import LoginRequest, RegisterRequest, SocialLoginRequest, TokenResponse
from skillpath.auth.service import (
    ExternalIdentity,
    authenticate_user,
    external_identity_login,
    register_user,
    simulated_identity,
)
from skillpath.config import get_settings
from skillpath.database import get_session
from skillpath.exceptions import ConflictError, InvalidCredentialsError

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


def require_simulated_social_login() -> None:
    """Hide the simulated provider routes when they are switched off."""
    if not get_settings().simulated_social_login:
        raise HTTPException(status_code=404, detail="Not Found")


def _token_response(email: str) -> TokenResponse:
    settings = get_settings()
    return TokenResponse(
        access_token=create_access_token(email),
        token_type="bearer",
        expires_in=settings.jwt_access_token_expire_minutes * 60,
    )


# ---------------------------------------------------------------------------
# Email + password
# ---------------------------------------------------------------------------


@router.post("/register", response_model=TokenResponse)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """Register with email + password. Creates the user and a default profile."""
    try:
        user = await register_user(db, email=body.email, full_name=body.full_name, password=body.password)
    except PasswordStrengthError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    await db.commit()
    return _token_response(user.email)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """Login with email + password. Updates the daily streak."""
    try:
        user = await authenticate_user(db, body.email, body.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e

    await db.commit()
    return _token_response(user.email)


# ---------------------------------------------------------------------------
# External identity providers
# ---------------------------------------------------------------------------


@router.post("/social", response_model=TokenResponse, dependencies=[Depends(require_simulated_social_login)])
@router.post(
    "/google",
    response_model=TokenResponse,
    dependencies=[Depends(require_simulated_social_login)],
    include_in_schema=False,
)
async def social_login(
    body: SocialLoginRequest,
    db: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """Sign in with profile data already obtained from a provider."""
    identity = ExternalIdentity(
        provider=body.provider_id.lower(),
        email=body.email,
        name=body.name,
        avatar_url=body.photo_url,
    )
    try:
        user, _created = await external_identity_login(db, identity)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    await db.commit()
    return _token_response(user.email)


@router.get(
    "/signin/{provider}",
    response_class=RedirectResponse,
    dependencies=[Depends(require_simulated_social_login)],
)
async def social_signin_redirect(
    provider: str,
    db: AsyncSession = Depends(get_session),
) -> RedirectResponse:
    """Simulated provider callback: sign the canned identity in and redirect to the frontend."""
    identity = simulated_identity(provider)
    try:
        user, _created = await external_identity_login(db, identity)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    await db.commit()
    logger.info("social_signin_redirect", provider=identity.provider, user_id=user.id)
    token = create_access_token(user.email)
    settings = get_settings()
    return RedirectResponse(f"{settings.frontend_callback_url}?{urlencode({'token': token})}")
