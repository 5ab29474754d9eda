"""
Synthetic market data for demo display and indicator fallback.

Everything here is deterministic: candles come from a Mulberry32 generator
seeded by a hash of the ticker, so the same ticker always produces the same
series. Production fetch paths never call into this module.
"""

import math
import time
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from .models import (
    BollingerBands,
    Candle,
    IchimokuData,
    Indicators,
    MACDData,
    NewsItem,
    Quote,
    SMAData,
    normalize_ticker,
)
from .sentiment import classify_news

_MASK32 = 0xFFFFFFFF

SERIES_START = date(2026, 1, 20)
SERIES_LENGTH = 30


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def ticker_to_seed(ticker: str) -> int:
    """31-multiplier string hash folded to 32 bits."""
    h = 0
    for ch in ticker:
        h = (_imul(31, h) + ord(ch)) & _MASK32
    return h


def mulberry32_step(state: int) -> Tuple[int, float]:
    """
    Advance a Mulberry32 state once.

    Returns:
        Tuple of (next state, float in [0, 1))
    """
    state = (state + 0x6D2B79F5) & _MASK32
    t = _imul(state ^ (state >> 15), 1 | state)
    t = ((t + _imul(t ^ (t >> 7), 61 | t)) & _MASK32) ^ t
    return state, ((t ^ (t >> 14)) & _MASK32) / 4294967296


def mulberry32(seed: int) -> Callable[[], float]:
    """Return a generator function yielding floats in [0, 1)."""
    state = seed & _MASK32

    def next_float() -> float:
        nonlocal state
        state, value = mulberry32_step(state)
        return value

    return next_float


def round2(value: float) -> float:
    return math.floor(value * 100 + 0.5) / 100


def generate_candles(
    ticker: str, base_price: float, volatility: float, trend: float
) -> Tuple[Candle, ...]:
    """
    Generate a 30-day random walk with trend and mean reversion.

    Args:
        ticker: Seeds the generator
        base_price: Level the walk reverts towards
        volatility: Daily noise amplitude as a fraction of price
        trend: Drift between -1 and +1 over the period
    """
    rand = mulberry32(ticker_to_seed(ticker))
    candles: List[Candle] = []

    price = base_price * (0.95 + rand() * 0.1)

    if base_price < 5:
        base_volume = 2_000_000
    elif base_price < 15:
        base_volume = 800_000
    else:
        base_volume = 400_000

    for i in range(SERIES_LENGTH):
        daily_trend = trend * 0.003
        noise = (rand() - 0.5) * volatility * 2
        mean_revert = (base_price - price) * 0.02
        change = daily_trend * price + noise * price + mean_revert

        open_ = price
        close = max(0.01, price + change)
        high = max(open_, close) * (1 + rand() * volatility * 0.5)
        low = min(open_, close) * (1 - rand() * volatility * 0.5)

        volume_multiplier = 1 + abs(change / price) * 20 + rand() * 0.6
        volume = int(math.floor(base_volume * volume_multiplier + 0.5))

        candles.append(
            Candle(
                date=(SERIES_START + timedelta(days=i)).isoformat(),
                open=round2(open_),
                high=round2(high),
                low=round2(low),
                close=round2(close),
                volume=volume,
            )
        )
        price = close

    return tuple(candles)


@dataclass(frozen=True)
class SeedStock:
    """Configuration of one synthetic seed ticker."""

    ticker: str
    name: str
    sector: str
    base_price: float
    volatility: float
    trend: float
    indicators: Indicators


def _indicators(rsi, macd, bb, ichimoku, sma) -> Indicators:
    return Indicators(
        rsi=rsi,
        macd=MACDData(*macd),
        bollinger_bands=BollingerBands(*bb),
        ichimoku=IchimokuData(*ichimoku),
        sma=SMAData(*sma),
    )


SEED_STOCKS: Tuple[SeedStock, ...] = (
    SeedStock(
        "AISP", "Airship AI Holdings", "AI / video analytics", 3.12, 0.045, 0.3,
        _indicators(
            28.5, (0.08, 0.02, 0.06), (3.60, 3.20, 2.80),
            (3.15, 3.05, 2.95, 2.90), (3.05, 3.10, 2.85),
        ),
    ),
    SeedStock(
        "AXTI", "AXT Inc.", "Semiconductor substrates", 8.25, 0.030, 0.1,
        _indicators(
            52.3, (0.12, 0.10, 0.02), (9.10, 8.30, 7.50),
            (8.30, 8.20, 8.00, 8.15), (8.15, 8.05, 7.80),
        ),
    ),
    SeedStock(
        "BBAI", "BigBear.ai Holdings", "AI / decision intelligence", 4.15, 0.055, -0.4,
        _indicators(
            74.2, (-0.15, -0.05, -0.10), (4.50, 4.10, 3.70),
            (3.95, 4.10, 4.30, 4.25), (4.20, 4.00, 4.35),
        ),
    ),
    SeedStock(
        "GRRR", "Gorilla Technology", "AI / cybersecurity", 12.40, 0.035, 0.5,
        _indicators(
            58.7, (0.35, 0.15, 0.20), (13.50, 12.30, 11.10),
            (12.50, 12.20, 11.80, 11.60), (12.35, 12.00, 10.50),
        ),
    ),
    SeedStock(
        "POET", "POET Technologies", "Photonics", 7.10, 0.040, -0.1,
        _indicators(
            45.8, (-0.05, -0.08, 0.03), (7.90, 7.15, 6.40),
            (7.00, 7.10, 7.25, 7.05), (7.05, 7.20, 6.80),
        ),
    ),
    SeedStock(
        "VECO", "Veeco Instruments", "Semiconductor equipment", 30.50, 0.025, 0.2,
        _indicators(
            61.4, (0.45, 0.40, 0.05), (32.80, 30.20, 27.60),
            (30.60, 30.00, 29.50, 29.80), (30.40, 29.80, 28.50),
        ),
    ),
    SeedStock(
        "ATOM", "Atomera Inc.", "Semiconductor materials", 10.20, 0.042, -0.3,
        _indicators(
            38.1, (-0.22, -0.10, -0.12), (11.50, 10.40, 9.30),
            (10.00, 10.30, 10.60, 10.50), (10.15, 10.00, 10.80),
        ),
    ),
)

# (ticker, age in seconds, headline, summary, source)
_SEED_NEWS: Tuple[Tuple[str, int, str, str, str], ...] = (
    (
        "AISP", 7200,
        "Airship AI: Paul Allen's Estate Acquires 100K Shares",
        "Major insider buy signals confidence in AI video analytics platform growth.",
        "MarketWatch",
    ),
    (
        "AXTI", 3600,
        "AXT Q4 Revenue Surges 25% on AI Semiconductor Demand",
        "Company reports record quarterly revenue driven by substrate orders.",
        "Reuters",
    ),
    (
        "BBAI", 14400,
        "BigBear.ai Wins $50M Airport Biometrics Contract",
        "Contract expansion with major US airports for AI-powered screening.",
        "Business Wire",
    ),
    (
        "GRRR", 43200,
        "Northland Raises GRRR Target to $40 from $35",
        "Analyst sees strong cybersecurity demand driving revenue growth.",
        "Northland Capital",
    ),
    (
        "POET", 36000,
        "POET Technologies Partners with Major Cloud Provider",
        "Strategic partnership to integrate photonic interconnects in data centers.",
        "GlobeNewswire",
    ),
    (
        "VECO", 50400,
        "Veeco Reports Strong Q4, Guides Higher on AI Chip Demand",
        "Equipment maker beats estimates. Revenue guidance raised.",
        "Barrons",
    ),
    (
        "ATOM", 72000,
        "Atomera Faces Delays in MST Technology Licensing",
        "Adoption weak and slower than expected, timeline pushed to 2027.",
        "EE Times",
    ),
)


class SyntheticMarketData:
    """
    Deterministic stand-in provider for the seed tickers.

    Exposes the same fetch operations as the live market data service; any
    ticker outside the seed universe yields no data.
    """

    def __init__(self, seeds: Tuple[SeedStock, ...] = SEED_STOCKS):
        self._seeds: Dict[str, SeedStock] = {s.ticker: s for s in seeds}

    @property
    def tickers(self) -> List[str]:
        return list(self._seeds)

    def seed(self, ticker: str) -> Optional[SeedStock]:
        return self._seeds.get(normalize_ticker(ticker))

    def search(self, query: str) -> List[SeedStock]:
        """Seeds whose ticker, name or sector contains the query, case-insensitive."""
        q = query.strip().lower()
        return [
            s
            for s in self._seeds.values()
            if q in s.ticker.lower() or q in s.name.lower() or q in s.sector.lower()
        ]

    async def get_candles(self, ticker: str) -> Optional[Tuple[Candle, ...]]:
        seed = self.seed(ticker)
        if seed is None:
            return None
        return generate_candles(
            seed.ticker, seed.base_price, seed.volatility, seed.trend
        )

    async def get_quote(self, ticker: str) -> Optional[Quote]:
        candles = await self.get_candles(ticker)
        if not candles:
            return None
        last, prev = candles[-1], candles[-2]
        change = round2(last.close - prev.close)
        return Quote(
            price=last.close,
            change=change,
            change_percent=round2(change / prev.close * 100),
            high=last.high,
            low=last.low,
            open=last.open,
            prev_close=prev.close,
        )

    async def get_indicators(self, ticker: str) -> Optional[Indicators]:
        seed = self.seed(ticker)
        return seed.indicators if seed else None

    async def get_news(
        self, ticker: str, now: Optional[float] = None
    ) -> List[NewsItem]:
        symbol = normalize_ticker(ticker)
        current = int(now if now is not None else time.time())
        articles = [
            {
                "id": index + 1,
                "headline": headline,
                "summary": summary,
                "source": source,
                "url": "#",
                "datetime": current - age,
            }
            for index, (seed_ticker, age, headline, summary, source) in enumerate(
                _SEED_NEWS
            )
            if seed_ticker == symbol
        ]
        return [
            classify_news(symbol, article, idx) for idx, article in enumerate(articles)
        ]
