"""Domain errors raised by services and translated to HTTP status codes by routers."""

from __future__ import annotations


class ConflictError(ValueError):
    """The resource already exists (e.g. an email that is already registered)."""


class InvalidCredentialsError(ValueError):
    """Email/password pair does not match a stored user."""


class NotFoundError(LookupError):
    """The acting identity or a referenced row does not resolve."""
