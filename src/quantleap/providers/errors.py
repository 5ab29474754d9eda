"""Failure taxonomy for upstream market data providers."""

from enum import Enum
from typing import Optional


class FailureCategory(Enum):
    """Why a fetch produced no data."""

    TRANSPORT = "transport"
    REJECTED = "rejected"
    RATE_LIMITED = "rate_limited"
    DATA_SHAPE = "data_shape"


class ProviderError(Exception):
    """Base exception for provider failures; never escapes a fetch boundary."""

    category = FailureCategory.TRANSPORT

    def __init__(self, provider: str, message: str, status: Optional[int] = None):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message
        self.status = status


class TransportError(ProviderError):
    """Provider unreachable, connection reset or timed out."""

    category = FailureCategory.TRANSPORT


class ProviderRejectedError(ProviderError):
    """Non-2xx response or an embedded error marker."""

    category = FailureCategory.REJECTED


class RateLimitedError(ProviderRejectedError):
    """Embedded rate-limit notice in an otherwise successful response."""

    category = FailureCategory.RATE_LIMITED


class DataShapeError(ProviderError):
    """Expected field missing or malformed in a successful response."""

    category = FailureCategory.DATA_SHAPE
