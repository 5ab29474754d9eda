"""Pure domain logic: models, classifiers, indicator evaluators."""

from .ichimoku import calculate_ichimoku
from .models import (
    BollingerBands,
    Candle,
    CompositeSignal,
    IchimokuData,
    IndicatorSignal,
    Indicators,
    IndicatorSnapshot,
    MACDData,
    NewsItem,
    OverallSignal,
    Quote,
    Sentiment,
    SignalDirection,
    SignalEntry,
    SMAData,
    normalize_ticker,
)
from .sentiment import analyze_sentiment, classify_news
from .signals import calculate_composite_signal

__all__ = [
    "BollingerBands",
    "Candle",
    "CompositeSignal",
    "IchimokuData",
    "IndicatorSignal",
    "Indicators",
    "IndicatorSnapshot",
    "MACDData",
    "NewsItem",
    "OverallSignal",
    "Quote",
    "Sentiment",
    "SignalDirection",
    "SignalEntry",
    "SMAData",
    "analyze_sentiment",
    "calculate_composite_signal",
    "calculate_ichimoku",
    "classify_news",
    "normalize_ticker",
]
