"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
from fastapi import HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from skillpath.auth.jwt import subject_email

_bearer = HTTPBearer()


async def get_current_email(
    credentials: HTTPAuthorizationCredentials = Security(_bearer),
) -> str:
    """
    Verify the bearer token and return the acting user's email.

    Only the identity is resolved here; services look the user up themselves
    and raise NotFoundError when it no longer exists.
    """
    try:
        return subject_email(credentials.credentials)
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
