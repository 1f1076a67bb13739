"""
Centralized error handling for service/API failures.
Domain exceptions plus a reusable helper so routes stay thin and new error types are easy to add.
"""
from __future__ import annotations

from typing import Any

from fastapi import HTTPException

from launchboard.config import settings

# ---------------------------------------------------------------------------
# Constants: status codes and user-facing messages
# ---------------------------------------------------------------------------

STATUS_UNAUTHORIZED = 401  # no identity from the auth provider
STATUS_FORBIDDEN = 403
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409
STATUS_UNPROCESSABLE = 422  # bad form input, shown inline
STATUS_SERVICE_UNAVAILABLE = 503  # store write failed
STATUS_INTERNAL_ERROR = 500

MSG_AUTH_REQUIRED = "Authentication required. Please sign in to continue."
MSG_STORE_WRITE_FAILED = "Could not save your change. Please try again."
MSG_STALE_DATA = "Showing recently cached launches; live data is temporarily unavailable."
MSG_NO_DATA = "Launches are temporarily unavailable."
MSG_STALE_SUBMISSIONS = "Showing recently cached submissions; live data is temporarily unavailable."
MSG_NO_SUBMISSIONS = "Submissions are temporarily unavailable."


class LaunchboardError(Exception):
    """Base for errors scoped to a single user action."""


class SubmissionValidationError(LaunchboardError):
    """Bad form input. Carries field -> message for inline display."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))


class AuthRequiredError(LaunchboardError):
    def __init__(self, sign_in_path: str | None = None):
        self.sign_in_path = sign_in_path or settings.sign_in_path
        super().__init__(MSG_AUTH_REQUIRED)


class ForbiddenError(LaunchboardError):
    pass


class NotFoundError(LaunchboardError):
    pass


class UsernameTakenError(LaunchboardError):
    pass


class StoreWriteError(LaunchboardError):
    """Store rejected or failed a write. Never retried automatically."""


# ---------------------------------------------------------------------------
# Error rules: (exception type, status_code, detail builder)
# Add new rules here instead of scattering checks in routes. First match wins.
# ---------------------------------------------------------------------------


def _detail_validation(exc: Exception) -> Any:
    return {"error": "validation", "fields": getattr(exc, "errors", {})}


def _detail_auth(exc: Exception) -> Any:
    return {"error": "auth_required", "message": MSG_AUTH_REQUIRED, "sign_in": getattr(exc, "sign_in_path", settings.sign_in_path)}


def _detail_message(exc: Exception) -> Any:
    return str(exc)


def _detail_store_write(exc: Exception) -> Any:
    return MSG_STORE_WRITE_FAILED


SERVICE_ERROR_RULES: list[tuple[type[Exception], int, Any]] = [
    (SubmissionValidationError, STATUS_UNPROCESSABLE, _detail_validation),
    (AuthRequiredError, STATUS_UNAUTHORIZED, _detail_auth),
    (ForbiddenError, STATUS_FORBIDDEN, _detail_message),
    (NotFoundError, STATUS_NOT_FOUND, _detail_message),
    (UsernameTakenError, STATUS_CONFLICT, _detail_message),
    (StoreWriteError, STATUS_SERVICE_UNAVAILABLE, _detail_store_write),
]


def service_error_to_http(exc: Exception) -> HTTPException:
    """
    Map an exception from a service call into an HTTPException.
    Uses SERVICE_ERROR_RULES for known error types; otherwise returns 500 with the exception message.
    """
    for exc_type, status_code, detail in SERVICE_ERROR_RULES:
        if isinstance(exc, exc_type):
            return HTTPException(status_code=status_code, detail=detail(exc))
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail=str(exc))
