"""Application errors raised by services and rendered by the API."""

from typing import Any, Dict

from fastapi import status


class AppError(Exception):
    """Base application error."""

    def __init__(self, message: str, code: str, http_status: int = 400):
        """Initialize error."""
        self.message = message
        self.code = code
        self.http_status = http_status
        super().__init__(message)


class ValidationError(AppError):
    """Missing or invalid input (non-positive amount, empty name, ...)."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, "validation_error", status.HTTP_400_BAD_REQUEST)


class NotAuthorizedError(AppError):
    """Missing, wrong or expired credentials."""

    def __init__(self, message: str = "NOT_AUTHORIZED"):
        super().__init__(message, "not_authorized", status.HTTP_401_UNAUTHORIZED)


class NotFoundError(AppError):
    """Referenced entity does not exist."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, "not_found", status.HTTP_404_NOT_FOUND)


class ConflictError(AppError):
    """Uniqueness violation (room number, tenant username)."""

    def __init__(self, message: str = "Already exists"):
        super().__init__(message, "conflict", status.HTTP_409_CONFLICT)


class ExternalServiceError(AppError):
    """Blob store or payment provider failure."""

    def __init__(self, message: str = "External service error"):
        super().__init__(message, "external_service_error", status.HTTP_502_BAD_GATEWAY)


class ConfigurationError(AppError):
    """Server is missing required configuration."""

    def __init__(self, message: str = "Server misconfiguration"):
        super().__init__(message, "configuration_error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(error: AppError) -> Dict[str, Any]:
    """Create a standardized error response."""
    return {
        "error": {
            "code": error.code,
            "message": error.message,
        }
    }


__all__ = [
    "AppError",
    "ConfigurationError",
    "ConflictError",
    "ExternalServiceError",
    "NotAuthorizedError",
    "NotFoundError",
    "ValidationError",
    "error_response",
]
