"""Domain error taxonomy shared by services and the API layer.

Each error carries the HTTP status it maps to and a message that is safe to
show to clients. Handlers registered in ``arboretum.main`` render them as
``{"error": message}``.
"""
from __future__ import annotations

from fastapi import status


class ArboretumError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ArboretumError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ConflictError(ArboretumError):
    """Unique constraint violation (username or email already taken)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Username or email already taken"


class SelfDeleteError(ValidationError):
    default_message = "You cannot delete your own account"


class AuthError(ArboretumError):
    """Bad credentials. Never says which half of the pair was wrong."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class UnauthenticatedError(ArboretumError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class ForbiddenError(ArboretumError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


class NotFoundError(ArboretumError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ServiceUnavailableError(ArboretumError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service temporarily unavailable"


class InternalError(ArboretumError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
