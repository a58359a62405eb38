"""
Core modules for the Prompt Gallery API.

This package contains fundamental utilities used across the application:
- config: Application settings and configuration
- security: Optional bearer key check
- exceptions: Custom exception classes
"""

from .config import Settings, get_settings
from .exceptions import (
    AppException,
    AuthenticationError,
    CollectionNotFoundError,
    ConfigurationError,
    ContentBlockedError,
    DatabaseUnavailableError,
    ExternalServiceError,
    GenerationError,
    NotFoundError,
    PromptNotFoundError,
    StorageError,
    ValidationError,
)

__all__ = [
    # Config
    "get_settings",
    "Settings",
    # Exceptions
    "AppException",
    "AuthenticationError",
    "CollectionNotFoundError",
    "ConfigurationError",
    "ContentBlockedError",
    "DatabaseUnavailableError",
    "ExternalServiceError",
    "GenerationError",
    "NotFoundError",
    "PromptNotFoundError",
    "StorageError",
    "ValidationError",
]
