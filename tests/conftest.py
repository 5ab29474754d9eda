"""Shared test configuration and fixtures."""

import sys
from unittest.mock import AsyncMock, Mock, patch

import pytest

sys.path.append("src")
from quantleap.core.models import (
    BollingerBands,
    IchimokuData,
    Indicators,
    MACDData,
    NewsItem,
    Quote,
    Sentiment,
    SMAData,
)


class FakeClock:
    """Manually advanced clock usable as both time source and sleep."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def test_env_vars():
    """Test credentials for all tests so nothing reaches a real service."""
    with patch.dict(
        "os.environ",
        {
            "ENVIRONMENT": "testing",
            "FINNHUB_API_KEY": "test_finnhub_key",
            "ALPHA_VANTAGE_API_KEY": "test_av_key",
            "TELEGRAM_BOT_TOKEN": "test_bot_token_123456",
            "TELEGRAM_CHAT_ID": "123456",
            "CRON_SECRET": "test_cron_secret",
        },
    ):
        yield


@pytest.fixture(autouse=True)
def clean_lru_cache():
    """Clear LRU caches between tests to avoid state pollution."""
    from quantleap.config.settings import get_settings
    from quantleap.webapi import dependencies

    cached = [
        get_settings,
        dependencies.get_cache,
        dependencies.get_market_data_service,
        dependencies.get_synthetic_data,
        dependencies.get_live_indicator_source,
        dependencies.get_alert_dispatcher,
        dependencies.get_watchlist_store,
    ]
    for func in cached:
        func.cache_clear()

    yield

    for func in cached:
        func.cache_clear()


@pytest.fixture
def mock_telegram_bot():
    """Mock telegram bot for testing."""
    mock_bot = Mock()
    mock_bot.send_message = AsyncMock(return_value=True)
    mock_bot.is_configured = True
    return mock_bot


@pytest.fixture
def aisp_indicators():
    """Indicator set whose composite at price 3.12 is BUY with score 85."""
    return Indicators(
        rsi=28.5,
        macd=MACDData(macd=0.08, signal=0.02, histogram=0.06),
        bollinger_bands=BollingerBands(upper=3.60, middle=3.20, lower=2.80),
        ichimoku=IchimokuData(tenkan=3.15, kijun=3.05, senkou_a=2.95, senkou_b=2.90),
        sma=SMAData(sma20=3.05, sma50=3.10, sma200=2.85),
    )


@pytest.fixture
def sample_quote():
    return Quote(
        price=3.12,
        change=0.07,
        change_percent=2.3,
        high=3.20,
        low=3.01,
        open=3.05,
        prev_close=3.05,
    )


@pytest.fixture
def make_news():
    """Factory for classified news items."""

    def _make(
        ticker="AISP",
        datetime=1_700_000_000,
        is_urgent=True,
        headline="AISP wins FDA approval",
        sentiment=Sentiment.POSITIVE,
        score=100,
        keywords=("approval",),
        news_id=1,
    ):
        return NewsItem(
            id=news_id,
            ticker=ticker,
            headline=headline,
            summary="",
            source="Reuters",
            url="https://example.com/news",
            datetime=datetime,
            sentiment=sentiment,
            sentiment_score=score,
            is_urgent=is_urgent,
            matched_keywords=tuple(keywords),
        )

    return _make
