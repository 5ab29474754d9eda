"""Alert formatting and dispatch."""

from .formatting import (
    escape_html,
    format_news_alert,
    format_signal_summary,
    sort_entries,
)
from .models import AlertKind, NotificationResult
from .service import AlertDispatcher

__all__ = [
    "AlertDispatcher",
    "AlertKind",
    "NotificationResult",
    "escape_html",
    "format_news_alert",
    "format_signal_summary",
    "sort_entries",
]
