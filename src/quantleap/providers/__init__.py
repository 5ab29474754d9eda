"""Upstream market data providers."""

from .alpha_vantage import AlphaVantageClient
from .base import MarketDataProvider
from .errors import (
    DataShapeError,
    FailureCategory,
    ProviderError,
    ProviderRejectedError,
    RateLimitedError,
    TransportError,
)
from .finnhub import FinnhubClient
from .rate_gate import RateGate

__all__ = [
    "AlphaVantageClient",
    "DataShapeError",
    "FailureCategory",
    "FinnhubClient",
    "MarketDataProvider",
    "ProviderError",
    "ProviderRejectedError",
    "RateGate",
    "RateLimitedError",
    "TransportError",
]
