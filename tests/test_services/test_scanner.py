"""Tests for the scan orchestrator."""

import sys
from unittest.mock import AsyncMock, Mock

import pytest

sys.path.append("src")
from quantleap.core.models import OverallSignal
from quantleap.services.notification import AlertKind, NotificationResult
from quantleap.services.scanner import (
    URGENT_WINDOW_SECONDS,
    ScanOrchestrator,
    ScanState,
    filter_recent_urgent,
)

NOW = 1_700_000_000


def ok(kind=AlertKind.URGENT_NEWS, ticker=None):
    return NotificationResult(kind=kind, ticker=ticker, success=True)


@pytest.fixture
def market_data(sample_quote):
    provider = Mock()
    provider.get_quote = AsyncMock(return_value=sample_quote)
    provider.get_news = AsyncMock(return_value=[])
    return provider


@pytest.fixture
def indicator_source(aisp_indicators):
    source = Mock()
    source.get_indicators = AsyncMock(return_value=aisp_indicators)
    return source


@pytest.fixture
def dispatcher():
    alerts = Mock()
    alerts.send_news_alert = AsyncMock(return_value=ok())
    alerts.send_signal_summary = AsyncMock(
        return_value=ok(kind=AlertKind.SIGNAL_SUMMARY)
    )
    return alerts


@pytest.fixture
def orchestrator(market_data, indicator_source, dispatcher, fake_clock):
    return ScanOrchestrator(
        market_data,
        indicator_source,
        dispatcher,
        clock=fake_clock,
        sleep=fake_clock.sleep,
    )


class TestFilterRecentUrgent:
    def test_window_is_exclusive(self, make_news):
        cutoff = NOW - URGENT_WINDOW_SECONDS
        news = [
            make_news(news_id=1, datetime=cutoff),
            make_news(news_id=2, datetime=cutoff + 1),
            make_news(news_id=3, datetime=NOW, is_urgent=False),
        ]

        assert [n.id for n in filter_recent_urgent(news, cutoff)] == [2]


class TestScanOrchestrator:
    @pytest.mark.asyncio
    async def test_happy_path_scores_and_summarizes(self, orchestrator, dispatcher):
        report = await orchestrator.run(["aisp", "axti"])

        assert report.checked_tickers == 2
        assert report.errors == []
        assert [e.ticker for e in report.entries] == ["AISP", "AXTI"]
        assert report.entries[0].overall == OverallSignal.BUY
        assert report.entries[0].buy_score == 85
        assert report.signals_sent is True
        dispatcher.send_signal_summary.assert_awaited_once()
        assert orchestrator.state == ScanState.IDLE

    @pytest.mark.asyncio
    async def test_price_failure_skips_ticker_only(
        self, orchestrator, market_data, sample_quote, dispatcher
    ):
        market_data.get_quote = AsyncMock(side_effect=[None, sample_quote])

        report = await orchestrator.run(["AISP", "AXTI"])

        assert report.checked_tickers == 2
        assert report.errors == ["AISP: price fetch failed"]
        assert [e.ticker for e in report.entries] == ["AXTI"]
        market_data.get_news.assert_awaited_once_with("AXTI")

    @pytest.mark.asyncio
    async def test_no_entries_means_no_summary(
        self, orchestrator, market_data, dispatcher
    ):
        market_data.get_quote.return_value = None

        report = await orchestrator.run(["AISP", "AXTI"])

        assert report.entries == []
        assert report.signals_sent is False
        dispatcher.send_signal_summary.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_indicators_not_scored(
        self, orchestrator, indicator_source, dispatcher
    ):
        indicator_source.get_indicators.return_value = None

        report = await orchestrator.run(["AISP"])

        assert report.entries == []
        assert report.errors == []
        dispatcher.send_signal_summary.assert_not_called()

    @pytest.mark.asyncio
    async def test_urgent_news_dispatched_with_quote(
        self, orchestrator, market_data, dispatcher, make_news
    ):
        market_data.get_news.return_value = [
            make_news(news_id=1, datetime=NOW - 60),
            make_news(news_id=2, datetime=NOW - 120),
            make_news(news_id=3, datetime=NOW - 7200),
            make_news(news_id=4, datetime=NOW - 30, is_urgent=False),
        ]

        report = await orchestrator.run(["AISP"])

        assert report.urgent_news_found == 2
        assert report.urgent_news_sent == 2
        sent = [c.args for c in dispatcher.send_news_alert.await_args_list]
        assert [args[0].id for args in sent] == [1, 2]
        assert sent[0][1:] == (3.12, 2.3)

    @pytest.mark.asyncio
    async def test_failed_alert_not_counted_as_sent(
        self, orchestrator, market_data, dispatcher, make_news
    ):
        market_data.get_news.return_value = [
            make_news(news_id=1, datetime=NOW - 60),
            make_news(news_id=2, datetime=NOW - 60),
        ]
        dispatcher.send_news_alert = AsyncMock(
            side_effect=[
                NotificationResult(
                    kind=AlertKind.URGENT_NEWS, ticker="AISP", success=False, error="x"
                ),
                ok(ticker="AISP"),
            ]
        )

        report = await orchestrator.run(["AISP"])

        assert report.urgent_news_found == 2
        assert report.urgent_news_sent == 1

    @pytest.mark.asyncio
    async def test_news_failure_recorded_and_scoring_continues(
        self, orchestrator, market_data
    ):
        market_data.get_news.return_value = None

        report = await orchestrator.run(["AISP"])

        assert report.errors == ["AISP: news fetch failed"]
        assert len(report.entries) == 1

    @pytest.mark.asyncio
    async def test_pacing_between_tickers_and_alerts(
        self, orchestrator, market_data, fake_clock, make_news
    ):
        market_data.get_news.side_effect = [
            [make_news(news_id=1, datetime=NOW - 60), make_news(news_id=2, datetime=NOW - 60)],
            [],
            [],
        ]

        await orchestrator.run(["AISP", "AXTI", "BBAI"])

        assert fake_clock.sleeps == [0.5, 0.3, 0.3]

    @pytest.mark.asyncio
    async def test_summary_failure_reported(self, orchestrator, dispatcher):
        dispatcher.send_signal_summary.return_value = NotificationResult(
            kind=AlertKind.SIGNAL_SUMMARY, ticker=None, success=False, error="down"
        )

        report = await orchestrator.run(["AISP"])

        assert report.signals_sent is False

    @pytest.mark.asyncio
    async def test_state_reset_after_failure(self, orchestrator, market_data):
        market_data.get_quote = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(RuntimeError):
            await orchestrator.run(["AISP"])

        assert orchestrator.state == ScanState.IDLE

    @pytest.mark.asyncio
    async def test_report_to_dict(self, orchestrator):
        report = await orchestrator.run(["AISP"])

        data = report.to_dict()

        assert data["checked_tickers"] == 1
        assert data["entries"][0]["overall"] == "BUY"
        assert data["entries"][0]["ticker"] == "AISP"
