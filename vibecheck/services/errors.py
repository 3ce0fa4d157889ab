"""
Error taxonomy for I/O around the insights core.
Each error carries a ``kind`` (network, authorization or validation) and the
HTTP status it maps to through ``error_to_http``.
"""
from __future__ import annotations

from fastapi import HTTPException, status

MSG_BACKEND_UNAVAILABLE = "Could not reach the server. Pull to refresh and try again."
MSG_UNAUTHORIZED = "Wrong PIN or expired session."
MSG_INSIGHTS_DISABLED = "Insights are not configured."


class VibeCheckError(Exception):
    kind = "server"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class BackendUnavailableError(VibeCheckError):
    """Database or cache could not be reached."""

    kind = "network"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class AuthorizationError(VibeCheckError):
    """Bad PIN or missing/expired session."""

    kind = "authorization"
    status_code = status.HTTP_401_UNAUTHORIZED


class ValidationFailedError(VibeCheckError):
    kind = "validation"
    status_code = 422


class NotFoundError(ValidationFailedError):
    status_code = status.HTTP_404_NOT_FOUND


def error_to_http(exc: VibeCheckError) -> HTTPException:
    """Map a taxonomy error onto an HTTPException with a short user-facing detail."""
    if isinstance(exc, BackendUnavailableError):
        return HTTPException(status_code=exc.status_code, detail=MSG_BACKEND_UNAVAILABLE)
    if isinstance(exc, AuthorizationError):
        return HTTPException(status_code=exc.status_code, detail=exc.message or MSG_UNAUTHORIZED)
    return HTTPException(status_code=exc.status_code, detail=exc.message)
