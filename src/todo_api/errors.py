"""
Error taxonomy for the todo API.

Every failure that should reach the client as ``{"errorMessage": ...}`` is an
``ApiError``. The exception handlers registered in ``main.create_app`` map
``status_code`` onto the HTTP response.
"""
from __future__ import annotations

from typing import Optional


class ApiError(Exception):
    """Base class for failures reported to API clients."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ApiError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Invalid request data"


class NotFoundError(ApiError):
    """The referenced todo does not exist."""

    status_code = 404
    default_message = "Todo does not exist"


class StorageError(ApiError):
    """The storage backend failed."""

    status_code = 500
    default_message = "Storage operation failed"
