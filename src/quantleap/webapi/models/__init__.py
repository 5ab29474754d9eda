"""API Models package for response schemas."""

from .responses import (
    BaseResponse,
    ErrorResponse,
    HealthResponse,
    HealthStatus,
    ScanResponse,
    StatusResponse,
    SuccessResponse,
)

__all__ = [
    "BaseResponse",
    "SuccessResponse",
    "ErrorResponse",
    "HealthResponse",
    "HealthStatus",
    "ScanResponse",
    "StatusResponse",
]
