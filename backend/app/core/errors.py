"""
errors.py — Domain Errors for the User Service

Taxonomy:
- ValidationError: a missing or malformed field. Raised before any store access.
- NotFoundError: the existence check failed for a given id.
- PersistenceError: the store rejected or failed an operation.
- InvalidCredentialsError: login failed (unknown email or wrong password).

The API layer maps these to HTTP responses (see app.main).
"""

from typing import Optional


class UserServiceError(Exception):
    """Base class for all user service errors."""


class ValidationError(UserServiceError):
    """Raised when a user record fails validation for an action."""

    def __init__(self, field: str, reason: str):
        super().__init__(reason)
        self.field = field
        self.reason = reason


class NotFoundError(UserServiceError):
    """Raised when no user exists for the requested id."""

    def __init__(self, user_id: int):
        super().__init__(f"user {user_id} not found")
        self.user_id = user_id


class PersistenceError(UserServiceError):
    """Raised when the store fails. `conflict` marks uniqueness violations."""

    def __init__(self, message: str, conflict: bool = False, cause: Optional[Exception] = None):
        super().__init__(message)
        self.conflict = conflict
        self.cause = cause


class InvalidCredentialsError(UserServiceError):
    """Raised upon authentication failure."""
