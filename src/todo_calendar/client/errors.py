"""Errors raised by the todo API client."""

from typing import Optional


class ApiError(Exception):
    """Base class for failed API calls. ``message`` is safe to show to the user."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiValidationError(ApiError):
    """The server rejected the input (400); the message says what to fix."""


class ApiNotFoundError(ApiError):
    """The todo no longer exists on the server (404)."""


class ApiNetworkError(ApiError):
    """The request did not complete or the server answered with an unexpected status."""
