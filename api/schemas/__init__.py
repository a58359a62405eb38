"""
Pydantic schemas for API request/response validation.
"""

from .common import (
    ComponentHealth,
    DetailedHealthCheckResponse,
    ErrorDetail,
    ErrorResponse,
    HealthCheckResponse,
    HealthStatus,
    MessageResponse,
    Pagination,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "Pagination",
    "HealthStatus",
    "ComponentHealth",
    "HealthCheckResponse",
    "DetailedHealthCheckResponse",
    "MessageResponse",
]
