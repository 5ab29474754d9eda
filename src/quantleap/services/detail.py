"""Detail view loading for a selected ticker."""

import asyncio
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..config.logging import get_logger
from ..core.models import (
    BollingerBands,
    Candle,
    CompositeSignal,
    IchimokuData,
    Indicators,
    MACDData,
    NewsItem,
    Quote,
    SMAData,
    normalize_ticker,
)
from ..core.signals import calculate_composite_signal
from ..providers.base import MarketDataProvider
from .scanner import IndicatorSource

logger = get_logger(__name__)

# Neutral set shown when neither live nor seed indicators exist
DEFAULT_INDICATORS = Indicators(
    rsi=50.0,
    macd=MACDData(macd=0.0, signal=0.0, histogram=0.0),
    bollinger_bands=BollingerBands(upper=0.0, middle=0.0, lower=0.0),
    ichimoku=IchimokuData.unavailable(),
    sma=SMAData(sma20=0.0, sma50=0.0, sma200=0.0),
)


@dataclass
class DetailView:
    ticker: str
    candles: Tuple[Candle, ...]
    indicators: Optional[Indicators]
    news: List[NewsItem]
    signal: Optional[CompositeSignal]
    quote: Optional[Quote] = None

    @property
    def price(self) -> Optional[float]:
        """Live quote price, else the last candle close."""
        if self.quote is not None:
            return self.quote.price
        return self.candles[-1].close if self.candles else None

    @property
    def has_data(self) -> bool:
        return self.price is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ticker": self.ticker,
            "price": self.price,
            "quote": asdict(self.quote) if self.quote else None,
            "candles": [asdict(c) for c in self.candles],
            "indicators": self.indicators.to_dict() if self.indicators else None,
            "news": [item.to_dict() for item in self.news],
            "signal": self.signal.to_dict() if self.signal else None,
        }


class DetailViewLoader:
    """
    Loads quote, candles, indicators and news for one ticker concurrently.

    Any part the live provider cannot supply comes from the fallback
    provider (seed data) when one is given; indicators fall back to a
    neutral default set so a priced ticker always gets a signal.

    Selecting another ticker cancels the load in flight. A load that
    finishes after being superseded never replaces the current view.
    """

    def __init__(
        self,
        market_data: MarketDataProvider,
        indicator_source: IndicatorSource,
        fallback: Optional[MarketDataProvider] = None,
    ):
        self.market_data = market_data
        self.indicator_source = indicator_source
        self.fallback = fallback
        self.selected: Optional[str] = None
        self.view: Optional[DetailView] = None
        self._task: Optional[asyncio.Task] = None
        self._generation = 0
        self.logger = logger.bind(service="detail_loader")

    async def load(self, ticker: str) -> DetailView:
        symbol = normalize_ticker(ticker)
        quote, candles, indicators, news = await asyncio.gather(
            self.market_data.get_quote(symbol),
            self.market_data.get_candles(symbol),
            self.indicator_source.get_indicators(symbol),
            self.market_data.get_news(symbol),
        )

        if self.fallback is not None:
            if not candles:
                candles = await self.fallback.get_candles(symbol)
            if quote is None:
                quote = await self.fallback.get_quote(symbol)
            if news is None:
                news = await self.fallback.get_news(symbol)

        view = DetailView(
            ticker=symbol,
            candles=tuple(candles or ()),
            indicators=indicators,
            news=list(news or []),
            signal=None,
            quote=quote,
        )

        if view.price is not None:
            if view.indicators is None:
                self.logger.info("Using default indicators", ticker=symbol)
                view.indicators = DEFAULT_INDICATORS
            view.signal = calculate_composite_signal(view.price, view.indicators)

        return view

    def select(self, ticker: str) -> "asyncio.Task[Optional[DetailView]]":
        """Start loading a ticker, cancelling any previous selection's load."""
        symbol = normalize_ticker(ticker)
        if self._task is not None and not self._task.done():
            self._task.cancel()
            self.logger.debug("Cancelled superseded load", ticker=self.selected)

        self._generation += 1
        self.selected = symbol
        self.view = None
        self._task = asyncio.create_task(self._load_selected(symbol, self._generation))
        return self._task

    async def _load_selected(self, symbol: str, generation: int) -> Optional[DetailView]:
        view = await self.load(symbol)
        if generation != self._generation:
            self.logger.debug("Discarding stale detail view", ticker=symbol)
            return None
        self.view = view
        return view
