"""Keyword-based sentiment and urgency classification for news items."""

import math
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from .models import NewsItem, Sentiment

POSITIVE_KEYWORDS: Tuple[str, ...] = (
    "upgrade",
    "beat",
    "growth",
    "revenue up",
    "contract",
    "partnership",
    "buy",
    "outperform",
    "bullish",
    "record",
    "surge",
    "soar",
    "breakout",
    "approval",
    "award",
    "expansion",
    "profit",
    "exceeded",
    "strong",
    "insider buy",
    "raised",
    "positive",
    "upside",
    "momentum",
)

NEGATIVE_KEYWORDS: Tuple[str, ...] = (
    "downgrade",
    "miss",
    "decline",
    "dilution",
    "lawsuit",
    "sell",
    "warning",
    "layoff",
    "loss",
    "debt",
    "risk",
    "investigation",
    "insider sell",
    "cut",
    "negative",
    "bearish",
    "underperform",
    "weak",
    "delay",
    "recall",
    "fraud",
    "bankruptcy",
    "default",
)

# Any of these triggers an immediate alert, regardless of polarity.
URGENT_KEYWORDS: Tuple[str, ...] = (
    "earnings",
    "revenue",
    "FDA",
    "approval",
    "contract",
    "insider buy",
    "insider sell",
    "upgrade",
    "downgrade",
    "acquisition",
    "merger",
    "SEC",
    "investigation",
)

POSITIVE_THRESHOLD = 60
NEGATIVE_THRESHOLD = 40


@dataclass(frozen=True)
class SentimentResult:
    sentiment: Sentiment
    score: int
    matched_keywords: Tuple[str, ...]
    is_urgent: bool


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def analyze_sentiment(headline: str, summary: str) -> SentimentResult:
    """
    Classify a headline and summary by keyword matching.

    Keywords match as plain substrings of the case-folded text, so "sell"
    also matches inside "seller" or "insider sell".

    Args:
        headline: Article headline
        summary: Article summary

    Returns:
        SentimentResult with polarity, 0-100 score, matched keywords and urgency
    """
    text = f"{headline or ''} {summary or ''}".lower()

    positives = [kw for kw in POSITIVE_KEYWORDS if kw.lower() in text]
    negatives = [kw for kw in NEGATIVE_KEYWORDS if kw.lower() in text]

    total = len(positives) + len(negatives)
    if total == 0:
        score = 50
        sentiment = Sentiment.NEUTRAL
    else:
        score = _round_half_up(len(positives) / total * 100)
        if score >= POSITIVE_THRESHOLD:
            sentiment = Sentiment.POSITIVE
        elif score <= NEGATIVE_THRESHOLD:
            sentiment = Sentiment.NEGATIVE
        else:
            sentiment = Sentiment.NEUTRAL

    is_urgent = any(kw.lower() in text for kw in URGENT_KEYWORDS)

    return SentimentResult(
        sentiment=sentiment,
        score=score,
        matched_keywords=tuple(positives + negatives),
        is_urgent=is_urgent,
    )


def classify_news(ticker: str, article: Mapping[str, Any], index: int) -> NewsItem:
    """Build a classified NewsItem from a raw provider article."""
    headline = article.get("headline") or ""
    summary = article.get("summary") or ""
    result = analyze_sentiment(headline, summary)

    return NewsItem(
        id=article.get("id") or index,
        ticker=ticker,
        headline=headline,
        summary=summary,
        source=article.get("source") or "Unknown",
        url=article.get("url") or "",
        datetime=article.get("datetime") or 0,
        sentiment=result.sentiment,
        sentiment_score=result.score,
        is_urgent=result.is_urgent,
        matched_keywords=result.matched_keywords,
    )


def time_ago(unix_timestamp: int, now: Optional[float] = None) -> str:
    """Describe how long ago a unix timestamp was, e.g. ``"3h ago"``."""
    current = int(now if now is not None else time.time())
    diff = current - int(unix_timestamp)

    if diff < 60:
        return "just now"
    if diff < 3600:
        return f"{diff // 60}m ago"
    if diff < 86400:
        return f"{diff // 3600}h ago"
    if diff < 604800:
        return f"{diff // 86400}d ago"
    return f"{diff // 604800}w ago"
