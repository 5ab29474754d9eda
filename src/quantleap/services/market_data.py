"""Cache-first market data service with primary/fallback provider strategy."""

from typing import Any, Optional, Tuple

from ..config.logging import get_logger
from ..core.ichimoku import calculate_ichimoku
from ..core.models import (
    BollingerBands,
    Candle,
    Indicators,
    IndicatorSnapshot,
    MACDData,
    NewsItem,
    Quote,
    SMAData,
    normalize_ticker,
)
from ..core.sentiment import classify_news
from ..providers.alpha_vantage import SMA_PERIODS, AlphaVantageClient
from ..providers.finnhub import CANDLE_WINDOW_DAYS, FinnhubClient
from .cache import DataField, TTLCache

logger = get_logger(__name__)


class MarketDataService:
    """
    Per-field fetch operations for one ticker at a time.

    Each operation consults the cache first and populates it after a
    successful fetch. Failures come back as None; nothing here raises for
    provider problems.
    """

    def __init__(
        self,
        finnhub: FinnhubClient,
        alpha_vantage: AlphaVantageClient,
        cache: TTLCache,
        news_lookback_days: int = 7,
        news_limit: int = 10,
    ):
        self.finnhub = finnhub
        self.alpha_vantage = alpha_vantage
        self.cache = cache
        self.news_lookback_days = news_lookback_days
        self.news_limit = news_limit
        self.logger = logger.bind(service="market_data")

    async def get_quote(self, ticker: str) -> Optional[Quote]:
        symbol = normalize_ticker(ticker)
        cached = self.cache.get(DataField.QUOTE, symbol)
        if cached is not None:
            return cached

        quote = await self.finnhub.get_quote(symbol)
        if quote is not None:
            self.cache.set(DataField.QUOTE, symbol, quote)
        return quote

    async def get_candles(self, ticker: str) -> Optional[Tuple[Candle, ...]]:
        """Daily candles from Finnhub, falling back to the Alpha Vantage series."""
        symbol = normalize_ticker(ticker)
        cached = self.cache.get(DataField.CANDLES, symbol)
        if cached is not None:
            return cached

        candles = await self.finnhub.get_candles(symbol, days=CANDLE_WINDOW_DAYS)
        if not candles:
            self.logger.info("Falling back to secondary candle provider", symbol=symbol)
            candles = await self.alpha_vantage.get_daily_candles(
                symbol, limit=CANDLE_WINDOW_DAYS
            )

        if not candles:
            self.logger.warning("No candle data from any provider", symbol=symbol)
            return None

        self.cache.set(DataField.CANDLES, symbol, candles)
        return candles

    async def get_news(self, ticker: str) -> Optional[Tuple[NewsItem, ...]]:
        """Classified company news; None when the fetch failed."""
        symbol = normalize_ticker(ticker)
        cached = self.cache.get(DataField.NEWS, symbol)
        if cached is not None:
            return cached

        articles = await self.finnhub.get_company_news(
            symbol, lookback_days=self.news_lookback_days, limit=self.news_limit
        )
        if articles is None:
            return None

        news = tuple(
            classify_news(symbol, article, idx) for idx, article in enumerate(articles)
        )
        self.cache.set(DataField.NEWS, symbol, news)
        return news

    async def get_rsi(self, ticker: str) -> Optional[float]:
        symbol = normalize_ticker(ticker)
        cached = self.cache.get(DataField.RSI, symbol)
        if cached is not None:
            return cached

        rsi = await self.alpha_vantage.get_rsi(symbol)
        if rsi is not None:
            self.cache.set(DataField.RSI, symbol, rsi)
        return rsi

    async def get_macd(self, ticker: str) -> Optional[MACDData]:
        symbol = normalize_ticker(ticker)
        cached = self.cache.get(DataField.MACD, symbol)
        if cached is not None:
            return cached

        macd = await self.alpha_vantage.get_macd(symbol)
        if macd is not None:
            self.cache.set(DataField.MACD, symbol, macd)
        return macd

    async def get_bbands(self, ticker: str) -> Optional[BollingerBands]:
        symbol = normalize_ticker(ticker)
        cached = self.cache.get(DataField.BBANDS, symbol)
        if cached is not None:
            return cached

        bbands = await self.alpha_vantage.get_bbands(symbol)
        if bbands is not None:
            self.cache.set(DataField.BBANDS, symbol, bbands)
        return bbands

    async def get_sma(self, ticker: str) -> Optional[SMAData]:
        """SMA 20/50/200 from three sequential, gate-paced calls."""
        symbol = normalize_ticker(ticker)
        cached = self.cache.get(DataField.SMA, symbol)
        if cached is not None:
            return cached

        values = {}
        for period in SMA_PERIODS:
            values[period] = await self.alpha_vantage.get_sma(symbol, period)

        missing = [p for p, v in values.items() if v is None]
        if missing:
            self.logger.warning("Incomplete SMA set", symbol=symbol, missing=missing)
            return None

        sma = SMAData(sma20=values[20], sma50=values[50], sma200=values[200])
        self.cache.set(DataField.SMA, symbol, sma)
        return sma

    async def get_indicator_snapshot(self, ticker: str) -> IndicatorSnapshot:
        """
        RSI, MACD, Bollinger and SMA fetched one after another.

        A snapshot without RSI is returned for display but not cached.
        """
        symbol = normalize_ticker(ticker)
        cached = self.cache.get(DataField.INDICATORS, symbol)
        if cached is not None:
            return cached

        snapshot = IndicatorSnapshot(
            rsi=await self.get_rsi(symbol),
            macd=await self.get_macd(symbol),
            bollinger_bands=await self.get_bbands(symbol),
            sma=await self.get_sma(symbol),
        )

        if snapshot.is_cacheable:
            self.cache.set(DataField.INDICATORS, symbol, snapshot)
        else:
            self.logger.warning("Indicator snapshot missing RSI", symbol=symbol)
        return snapshot

    async def get_indicators(self, ticker: str) -> Optional[Indicators]:
        """
        Complete indicator set with Ichimoku derived from candles.

        None unless every indicator is available, including a non-sentinel
        Ichimoku (at least 26 candles).
        """
        symbol = normalize_ticker(ticker)
        snapshot = await self.get_indicator_snapshot(symbol)
        if not snapshot.is_complete:
            return None

        candles = await self.get_candles(symbol)
        ichimoku = calculate_ichimoku(candles or ())
        if ichimoku.is_unavailable:
            self.logger.info(
                "Ichimoku unavailable, insufficient candles",
                symbol=symbol,
                candle_count=len(candles or ()),
            )
            return None

        return snapshot.with_ichimoku(ichimoku)

    async def fetch(self, field: DataField, ticker: str) -> Any:
        """Dispatch a single-field fetch by DataField."""
        operations = {
            DataField.QUOTE: self.get_quote,
            DataField.CANDLES: self.get_candles,
            DataField.NEWS: self.get_news,
            DataField.RSI: self.get_rsi,
            DataField.MACD: self.get_macd,
            DataField.BBANDS: self.get_bbands,
            DataField.SMA: self.get_sma,
            DataField.INDICATORS: self.get_indicator_snapshot,
        }
        return await operations[field](ticker)
