"""Telegram message templates for urgent news and signal summaries."""

import html
from typing import Optional, Sequence

from ...core.models import NewsItem, OverallSignal, Sentiment, SignalEntry
from ...core.sentiment import time_ago

DIVIDER = "━━━━━━━━━━━━━━━━━"

SENTIMENT_EMOJIS = {
    Sentiment.POSITIVE: "🟢",
    Sentiment.NEGATIVE: "🔴",
    Sentiment.NEUTRAL: "🟡",
}

SENTIMENT_LABELS = {
    Sentiment.POSITIVE: "Positive",
    Sentiment.NEGATIVE: "Negative",
    Sentiment.NEUTRAL: "Neutral",
}

SIGNAL_EMOJIS = {
    OverallSignal.BUY: "🟢",
    OverallSignal.SELL: "🔴",
    OverallSignal.WATCH: "🟡",
}

# Summary ordering: BUY first, then SELL, then WATCH.
SIGNAL_PRIORITY = {
    OverallSignal.BUY: 0,
    OverallSignal.SELL: 1,
    OverallSignal.WATCH: 2,
}


def escape_html(text: str) -> str:
    """Escape the characters Telegram's HTML parse mode treats as markup."""
    return html.escape(text, quote=False)


def _change_str(change_percent: float) -> str:
    arrow = "▲" if change_percent >= 0 else "▼"
    return f"{arrow}{abs(change_percent):.1f}%"


def format_news_alert(
    news: NewsItem,
    price: Optional[float] = None,
    change_percent: Optional[float] = None,
    now: Optional[float] = None,
) -> str:
    """
    Format one urgent news item.

    Args:
        news: Classified news item
        price: Current price, appended when known
        change_percent: Daily change in percent
        now: Reference unix time for the "time ago" label

    Returns:
        HTML message text
    """
    keywords = ", ".join(news.matched_keywords) or "none"

    price_info = ""
    if price is not None:
        price_info = f"\n💰 Price: ${price:.2f}"
        if change_percent is not None:
            price_info += f" ({_change_str(change_percent)})"

    return (
        "🚨 <b>Quant Leap Urgent News</b>\n"
        f"{DIVIDER}\n"
        f"{SENTIMENT_EMOJIS[news.sentiment]} <b>{escape_html(news.ticker)}</b> - "
        f"{escape_html(news.source)} ({time_ago(news.datetime, now)})\n"
        f'"{escape_html(news.headline)}"\n'
        "\n"
        f"Sentiment: {SENTIMENT_LABELS[news.sentiment]} ({news.sentiment_score}%)\n"
        f"Keywords: {escape_html(keywords)}{price_info}\n"
        f"{DIVIDER}"
    )


def sort_entries(entries: Sequence[SignalEntry]) -> list[SignalEntry]:
    """Order entries BUY, SELL, WATCH; stable within each group."""
    return sorted(entries, key=lambda e: SIGNAL_PRIORITY[e.overall])


def format_signal_summary(entries: Sequence[SignalEntry]) -> str:
    """Format the per-scan summary of every scored ticker."""
    lines = []
    for entry in sort_entries(entries):
        if entry.overall == OverallSignal.BUY:
            score_str = f"  score {entry.buy_score}"
        elif entry.overall == OverallSignal.SELL:
            score_str = f"  score {entry.sell_score}"
        else:
            score_str = ""
        lines.append(
            f"{SIGNAL_EMOJIS[entry.overall]} {entry.overall.value} "
            f"<b>{escape_html(entry.ticker)}</b>  ${entry.price:.2f} "
            f"({_change_str(entry.change_percent)}){score_str}"
        )

    buy_count = sum(1 for e in entries if e.overall == OverallSignal.BUY)
    sell_count = sum(1 for e in entries if e.overall == OverallSignal.SELL)
    watch_count = len(entries) - buy_count - sell_count

    body = "\n".join(lines)
    return (
        "📊 <b>Quant Leap Signal Report</b>\n"
        f"{DIVIDER}\n"
        f"{body}\n"
        f"{DIVIDER}\n"
        f"BUY {buy_count} | SELL {sell_count} | WATCH {watch_count}\n"
        "⚠️ Advisory only, not investment advice."
    )
