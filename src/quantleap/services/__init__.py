"""Services for caching, market data, scanning and alerting."""

from .cache import DataField, TTLCache
from .detail import DetailView, DetailViewLoader
from .indicators import FallbackIndicatorSource
from .market_data import MarketDataService
from .notification import AlertDispatcher, NotificationResult
from .scanner import ScanOrchestrator, ScanReport, ScanState
from .watchlist import WatchlistState, WatchlistStore

__all__ = [
    "AlertDispatcher",
    "DataField",
    "DetailView",
    "DetailViewLoader",
    "FallbackIndicatorSource",
    "MarketDataService",
    "NotificationResult",
    "ScanOrchestrator",
    "ScanReport",
    "ScanState",
    "TTLCache",
    "WatchlistState",
    "WatchlistStore",
]
