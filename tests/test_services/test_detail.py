"""Tests for the detail view loader."""

import asyncio
import sys
from dataclasses import replace
from unittest.mock import AsyncMock, Mock

import pytest

sys.path.append("src")
from quantleap.core.models import Candle, OverallSignal
from quantleap.core.synthetic import SyntheticMarketData
from quantleap.services.detail import DEFAULT_INDICATORS, DetailViewLoader

CANDLES = (
    Candle(date="2026-01-05", open=3.0, high=3.2, low=2.9, close=3.05, volume=100),
    Candle(date="2026-01-06", open=3.05, high=3.2, low=3.0, close=3.12, volume=120),
)


@pytest.fixture
def market_data(make_news):
    provider = Mock()
    provider.get_quote = AsyncMock(return_value=None)
    provider.get_candles = AsyncMock(return_value=CANDLES)
    provider.get_news = AsyncMock(return_value=[make_news()])
    return provider


@pytest.fixture
def indicator_source(aisp_indicators):
    source = Mock()
    source.get_indicators = AsyncMock(return_value=aisp_indicators)
    return source


@pytest.fixture
def loader(market_data, indicator_source):
    return DetailViewLoader(market_data, indicator_source)


class TestLoad:
    @pytest.mark.asyncio
    async def test_full_view(self, loader):
        view = await loader.load("aisp")

        assert view.ticker == "AISP"
        assert view.price == 3.12
        assert view.signal.overall == OverallSignal.BUY
        assert len(view.news) == 1

        data = view.to_dict()
        assert data["price"] == 3.12
        assert data["candles"][-1]["close"] == 3.12
        assert data["signal"]["overall"] == "BUY"

    @pytest.mark.asyncio
    async def test_missing_parts(self, loader, market_data, indicator_source):
        market_data.get_candles.return_value = None
        market_data.get_news.return_value = None
        indicator_source.get_indicators.return_value = None

        view = await loader.load("AISP")

        assert view.candles == ()
        assert view.price is None
        assert view.news == []
        assert view.signal is None
        assert view.to_dict()["indicators"] is None
        assert view.has_data is False

    @pytest.mark.asyncio
    async def test_live_quote_price_preferred(self, loader, market_data, sample_quote):
        market_data.get_quote.return_value = replace(sample_quote, price=3.30)

        view = await loader.load("AISP")

        assert view.price == 3.30
        assert view.candles[-1].close == 3.12
        assert view.to_dict()["quote"]["price"] == 3.30

    @pytest.mark.asyncio
    async def test_priced_ticker_without_indicators_uses_defaults(
        self, loader, indicator_source
    ):
        indicator_source.get_indicators.return_value = None

        view = await loader.load("AISP")

        assert view.indicators == DEFAULT_INDICATORS
        assert view.signal is not None


class TestSyntheticFallback:
    @pytest.fixture
    def loader(self, market_data, indicator_source):
        market_data.get_candles.return_value = None
        market_data.get_news.return_value = None
        return DetailViewLoader(
            market_data, indicator_source, fallback=SyntheticMarketData()
        )

    @pytest.mark.asyncio
    async def test_seed_ticker_uses_synthetic_data(self, loader):
        synthetic = SyntheticMarketData()
        expected_quote = await synthetic.get_quote("AISP")

        view = await loader.load("aisp")

        assert len(view.candles) == 30
        assert view.candles == await synthetic.get_candles("AISP")
        assert view.price == expected_quote.price
        assert view.has_data is True
        assert view.signal is not None

    @pytest.mark.asyncio
    async def test_live_parts_kept_when_available(self, loader, market_data, sample_quote):
        market_data.get_quote.return_value = sample_quote

        view = await loader.load("AISP")

        assert view.price == 3.12
        assert len(view.candles) == 30

    @pytest.mark.asyncio
    async def test_unknown_ticker_has_no_data(self, loader, indicator_source):
        indicator_source.get_indicators.return_value = None

        view = await loader.load("ZZZZ")

        assert view.has_data is False
        assert view.signal is None
        assert view.news == []


class TestSelect:
    @pytest.mark.asyncio
    async def test_select_sets_view(self, loader):
        view = await loader.select("aisp")

        assert loader.selected == "AISP"
        assert loader.view is view

    @pytest.mark.asyncio
    async def test_new_selection_cancels_previous(self, loader, market_data):
        release = asyncio.Event()

        async def slow_candles(ticker):
            if ticker == "AISP":
                await release.wait()
            return CANDLES

        market_data.get_candles = AsyncMock(side_effect=slow_candles)

        first = loader.select("AISP")
        await asyncio.sleep(0)
        second = loader.select("AXTI")
        view = await second

        with pytest.raises(asyncio.CancelledError):
            await first
        assert first.cancelled()
        assert loader.selected == "AXTI"
        assert loader.view is view
        assert view.ticker == "AXTI"

    @pytest.mark.asyncio
    async def test_stale_result_is_discarded(self, loader):
        first = loader.select("AISP")
        loader._generation += 1

        assert await first is None
        assert loader.view is None
