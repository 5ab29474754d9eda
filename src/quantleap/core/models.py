"""Domain models for quotes, candles, indicators, signals and news."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


def normalize_ticker(ticker: str) -> str:
    """Normalize a ticker symbol to its canonical uppercase form."""
    if not ticker or not isinstance(ticker, str) or not ticker.strip():
        raise ValueError("Ticker must be a non-empty string")
    return ticker.strip().upper()


class SignalDirection(str, Enum):
    """Direction reported by a single indicator."""

    BUY = "BUY"
    SELL = "SELL"
    NEUTRAL = "NEUTRAL"


class OverallSignal(str, Enum):
    """Composite classification for a ticker."""

    BUY = "BUY"
    SELL = "SELL"
    WATCH = "WATCH"


class Sentiment(str, Enum):
    """News sentiment polarity."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Quote:
    """Point-in-time price snapshot."""

    price: float
    change: float
    change_percent: float
    high: float
    low: float
    open: float
    prev_close: float


@dataclass(frozen=True)
class Candle:
    """Daily OHLCV bar; ``date`` is YYYY-MM-DD."""

    date: str
    open: float
    high: float
    low: float
    close: float
    volume: int


@dataclass(frozen=True)
class MACDData:
    macd: float
    signal: float
    histogram: float


@dataclass(frozen=True)
class BollingerBands:
    upper: float
    middle: float
    lower: float


@dataclass(frozen=True)
class IchimokuData:
    tenkan: float
    kijun: float
    senkou_a: float
    senkou_b: float

    @classmethod
    def unavailable(cls) -> "IchimokuData":
        """All-zero sentinel used when the candle series is too short."""
        return cls(tenkan=0.0, kijun=0.0, senkou_a=0.0, senkou_b=0.0)

    @property
    def is_unavailable(self) -> bool:
        return (
            self.tenkan == 0
            and self.kijun == 0
            and self.senkou_a == 0
            and self.senkou_b == 0
        )


@dataclass(frozen=True)
class SMAData:
    sma20: float
    sma50: float
    sma200: float


@dataclass(frozen=True)
class Indicators:
    """Complete indicator set; every field is required."""

    rsi: float
    macd: MACDData
    bollinger_bands: BollingerBands
    ichimoku: IchimokuData
    sma: SMAData

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class IndicatorSnapshot:
    """
    Result of the combined indicator fetch.

    Any field may be missing when its sub-fetch failed. Ichimoku is not part
    of the snapshot because the indicator provider does not serve it.
    """

    rsi: Optional[float] = None
    macd: Optional[MACDData] = None
    bollinger_bands: Optional[BollingerBands] = None
    sma: Optional[SMAData] = None

    @property
    def is_cacheable(self) -> bool:
        return self.rsi is not None

    @property
    def is_complete(self) -> bool:
        return (
            self.rsi is not None
            and self.macd is not None
            and self.bollinger_bands is not None
            and self.sma is not None
        )

    def with_ichimoku(self, ichimoku: IchimokuData) -> Optional[Indicators]:
        """Build a full Indicators object, or None if any field is missing."""
        if not self.is_complete or ichimoku is None:
            return None
        return Indicators(
            rsi=self.rsi,
            macd=self.macd,
            bollinger_bands=self.bollinger_bands,
            ichimoku=ichimoku,
            sma=self.sma,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class IndicatorSignal:
    """Classification produced by one indicator evaluator."""

    name: str
    weight: int
    signal: SignalDirection
    reason: str


@dataclass(frozen=True)
class CompositeSignal:
    """Weighted aggregation of the five indicator signals."""

    overall: OverallSignal
    buy_score: int
    sell_score: int
    indicators: Tuple[IndicatorSignal, ...]

    @property
    def neutral_weight(self) -> int:
        return sum(
            s.weight for s in self.indicators if s.signal == SignalDirection.NEUTRAL
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall.value,
            "buy_score": self.buy_score,
            "sell_score": self.sell_score,
            "indicators": [
                {
                    "name": s.name,
                    "weight": s.weight,
                    "signal": s.signal.value,
                    "reason": s.reason,
                }
                for s in self.indicators
            ],
        }


@dataclass(frozen=True)
class NewsItem:
    """Company news article after sentiment and urgency classification."""

    id: int
    ticker: str
    headline: str
    summary: str
    source: str
    url: str
    datetime: int
    sentiment: Sentiment
    sentiment_score: int
    is_urgent: bool
    matched_keywords: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["sentiment"] = self.sentiment.value
        data["matched_keywords"] = list(self.matched_keywords)
        return data


@dataclass(frozen=True)
class SignalEntry:
    """One line of the per-scan signal summary."""

    ticker: str
    overall: OverallSignal
    buy_score: int
    sell_score: int
    price: float
    change_percent: float
