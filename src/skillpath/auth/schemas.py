"""Request/response schemas for authentication endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    """Email registration request."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    full_name: str | None = Field(None, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


class LoginRequest(BaseModel):
    """Login with email + password."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


class SocialLoginRequest(BaseModel):
    """Profile handed over by an identity provider (JSON call style)."""

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    name: str | None = Field(None, max_length=128)
    provider_id: str = Field("google", alias="providerId", max_length=32)
    photo_url: str | None = Field(None, alias="photoUrl")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


class TokenResponse(BaseModel):
    """Bearer token issued after any successful authentication."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
