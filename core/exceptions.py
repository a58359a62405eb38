"""
Custom exception classes for the application.

All exceptions inherit from AppException and include:
- error_code: Machine-readable error code
- message: Human-readable error message
- status_code: HTTP status code to return
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors."""

    error_code: str = "internal_error"
    message: str = "An unexpected error occurred"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result = {
            "code": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class AuthenticationError(AppException):
    """Raised when the bearer key is missing or wrong."""

    error_code = "authentication_failed"
    message = "Authentication failed"
    status_code = 401


class NotFoundError(AppException):
    """Raised when a resource is not found."""

    error_code = "not_found"
    message = "Resource not found"
    status_code = 404


class ValidationError(AppException):
    """Raised when input validation fails."""

    error_code = "validation_error"
    message = "Invalid input"
    status_code = 400


class ConfigurationError(AppException):
    """Raised when a required setting (e.g. API key) is missing."""

    error_code = "configuration_error"
    message = "Service is not configured"
    status_code = 500


class ExternalServiceError(AppException):
    """Raised when an external service fails."""

    error_code = "external_service_error"
    message = "External service unavailable"
    status_code = 503


class ContentBlockedError(AppException):
    """Raised when content is blocked by safety filter."""

    error_code = "content_blocked"
    message = "Content blocked by safety filter"
    status_code = 400


class GenerationError(AppException):
    """Raised when image generation fails."""

    error_code = "generation_failed"
    message = "Image generation failed"
    status_code = 500


class StorageError(AppException):
    """Raised when storage operation fails."""

    error_code = "storage_error"
    message = "Image storage failed"
    status_code = 500


class PromptNotFoundError(NotFoundError):
    """Raised when a prompt entry is not found."""

    error_code = "prompt_not_found"
    message = "Prompt not found"


class CollectionNotFoundError(NotFoundError):
    """Raised when a collection is not found."""

    error_code = "collection_not_found"
    message = "Collection not found"


class DatabaseUnavailableError(AppException):
    """Raised when a route needs the database but it is not initialized."""

    error_code = "database_unavailable"
    message = "Database not configured"
    status_code = 503
