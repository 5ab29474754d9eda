"""Sequential watchlist scan producing urgent news alerts and a signal summary."""

import asyncio
import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence

from ..config.logging import get_logger, log_performance
from ..core.models import Indicators, NewsItem, SignalEntry, normalize_ticker
from ..core.signals import calculate_composite_signal
from ..providers.base import MarketDataProvider
from .notification.service import AlertDispatcher

logger = get_logger(__name__)

URGENT_WINDOW_SECONDS = 3600


class IndicatorSource(Protocol):
    async def get_indicators(self, ticker: str) -> Optional[Indicators]:
        ...


class ScanState(Enum):
    """Phases of one scan cycle."""

    IDLE = "idle"
    FETCHING_PRICE = "fetching_price"
    FETCHING_NEWS = "fetching_news"
    DISPATCHING_URGENT = "dispatching_urgent"
    SCORING = "scoring"
    SUMMARIZING = "summarizing"


@dataclass
class ScanReport:
    """Outcome of one scan cycle."""

    checked_tickers: int = 0
    urgent_news_found: int = 0
    urgent_news_sent: int = 0
    signals_sent: bool = False
    errors: List[str] = field(default_factory=list)
    entries: List[SignalEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["entries"] = [
            {**asdict(entry), "overall": entry.overall.value} for entry in self.entries
        ]
        return data


def filter_recent_urgent(news: Sequence[NewsItem], cutoff: float) -> List[NewsItem]:
    """Urgent items published strictly after the cutoff."""
    return [item for item in news if item.is_urgent and item.datetime > cutoff]


class ScanOrchestrator:
    """
    Runs one scan over a list of tickers, one ticker at a time.

    Per ticker the quote is fetched first; without a price the ticker is
    skipped. Urgent news from the last hour is dispatched item by item, then
    the composite signal is scored. A single summary goes out at the end
    when at least one ticker was scored.
    """

    def __init__(
        self,
        market_data: MarketDataProvider,
        indicator_source: IndicatorSource,
        dispatcher: AlertDispatcher,
        ticker_pacing_seconds: float = 0.3,
        news_alert_pacing_seconds: float = 0.5,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.market_data = market_data
        self.indicator_source = indicator_source
        self.dispatcher = dispatcher
        self.ticker_pacing_seconds = ticker_pacing_seconds
        self.news_alert_pacing_seconds = news_alert_pacing_seconds
        self._clock = clock
        self._sleep = sleep
        self.state = ScanState.IDLE
        self.logger = logger.bind(service="scanner")

    async def run(self, tickers: Sequence[str]) -> ScanReport:
        report = ScanReport()
        scan_start = self._clock()
        cutoff = scan_start - URGENT_WINDOW_SECONDS
        start = time.perf_counter()

        self.logger.info("Scan started", ticker_count=len(tickers))

        try:
            for index, ticker in enumerate(tickers):
                if index > 0:
                    await self._sleep(self.ticker_pacing_seconds)
                await self._scan_ticker(normalize_ticker(ticker), cutoff, report)

            self.state = ScanState.SUMMARIZING
            if report.entries:
                result = await self.dispatcher.send_signal_summary(report.entries)
                report.signals_sent = bool(result and result.success)
        finally:
            self.state = ScanState.IDLE

        log_performance(
            "scan",
            (time.perf_counter() - start) * 1000,
            checked_tickers=report.checked_tickers,
            urgent_news_sent=report.urgent_news_sent,
            error_count=len(report.errors),
        )
        return report

    async def _scan_ticker(self, ticker: str, cutoff: float, report: ScanReport) -> None:
        report.checked_tickers += 1

        self.state = ScanState.FETCHING_PRICE
        quote = await self.market_data.get_quote(ticker)
        if quote is None:
            report.errors.append(f"{ticker}: price fetch failed")
            self.logger.warning("Skipping ticker without price", ticker=ticker)
            return

        self.state = ScanState.FETCHING_NEWS
        news = await self.market_data.get_news(ticker)
        if news is None:
            report.errors.append(f"{ticker}: news fetch failed")
            news = []

        urgent = filter_recent_urgent(news, cutoff)
        report.urgent_news_found += len(urgent)

        self.state = ScanState.DISPATCHING_URGENT
        for index, item in enumerate(urgent):
            if index > 0:
                await self._sleep(self.news_alert_pacing_seconds)
            result = await self.dispatcher.send_news_alert(
                item, quote.price, quote.change_percent
            )
            if result.success:
                report.urgent_news_sent += 1

        self.state = ScanState.SCORING
        indicators = await self.indicator_source.get_indicators(ticker)
        if indicators is None:
            self.logger.info("No indicators, ticker not scored", ticker=ticker)
            return

        signal = calculate_composite_signal(quote.price, indicators)
        report.entries.append(
            SignalEntry(
                ticker=ticker,
                overall=signal.overall,
                buy_score=signal.buy_score,
                sell_score=signal.sell_score,
                price=quote.price,
                change_percent=quote.change_percent,
            )
        )
