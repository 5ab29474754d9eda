"""Alert dispatcher sending urgent news and signal summaries."""

import time
from typing import Optional, Sequence

from ...comm.telegram import TelegramBot
from ...config.logging import get_logger
from ...core.models import NewsItem, SignalEntry
from .formatting import format_news_alert, format_signal_summary
from .models import AlertKind, NotificationResult

logger = get_logger(__name__)


class AlertDispatcher:
    """
    Formats alerts and hands them to the messaging transport.

    Delivery failures are logged and reported in the result; nothing is
    retried and nothing raises.
    """

    def __init__(self, bot: TelegramBot):
        self.bot = bot
        self.logger = logger.bind(service="alert_dispatcher")

    async def _deliver(
        self, kind: AlertKind, text: str, ticker: Optional[str] = None
    ) -> NotificationResult:
        start = time.perf_counter()
        error = None

        try:
            success = await self.bot.send_message(text)
            if not success:
                error = "Message delivery failed"
        except Exception as e:
            success = False
            error = str(e)

        delivery_time = (time.perf_counter() - start) * 1000

        if success:
            self.logger.info(
                "Alert delivered",
                kind=kind.value,
                ticker=ticker,
                delivery_time_ms=delivery_time,
            )
        else:
            self.logger.error(
                "Alert delivery failed", kind=kind.value, ticker=ticker, error=error
            )

        return NotificationResult(
            kind=kind,
            ticker=ticker,
            success=success,
            error=error,
            delivery_time_ms=delivery_time,
        )

    async def send_news_alert(
        self,
        news: NewsItem,
        price: Optional[float] = None,
        change_percent: Optional[float] = None,
    ) -> NotificationResult:
        text = format_news_alert(news, price, change_percent)
        return await self._deliver(AlertKind.URGENT_NEWS, text, ticker=news.ticker)

    async def send_signal_summary(
        self, entries: Sequence[SignalEntry]
    ) -> Optional[NotificationResult]:
        """Send the batched summary; None when there is nothing to report."""
        if not entries:
            return None
        text = format_signal_summary(entries)
        return await self._deliver(AlertKind.SIGNAL_SUMMARY, text)
