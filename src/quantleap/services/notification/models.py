"""Data models for alert dispatch."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AlertKind(Enum):
    """Types of outbound alerts."""

    URGENT_NEWS = "urgent_news"
    SIGNAL_SUMMARY = "signal_summary"


@dataclass
class NotificationResult:
    """Result of notification delivery attempt."""

    kind: AlertKind
    ticker: Optional[str]
    success: bool
    error: Optional[str] = None
    delivery_time_ms: float = 0.0
