"""Tests for the live-with-fallback indicator source."""

import sys
from unittest.mock import AsyncMock, Mock

import pytest

sys.path.append("src")
from quantleap.services.indicators import FallbackIndicatorSource


@pytest.fixture
def primary():
    source = Mock()
    source.get_indicators = AsyncMock(return_value=None)
    return source


@pytest.fixture
def fallback(aisp_indicators):
    source = Mock()
    source.get_indicators = AsyncMock(return_value=aisp_indicators)
    return source


class TestFallbackIndicatorSource:
    @pytest.mark.asyncio
    async def test_live_indicators_preferred(self, primary, fallback, aisp_indicators):
        primary.get_indicators.return_value = aisp_indicators

        result = await FallbackIndicatorSource(primary, fallback).get_indicators("AISP")

        assert result is aisp_indicators
        fallback.get_indicators.assert_not_called()

    @pytest.mark.asyncio
    async def test_falls_back_when_live_incomplete(self, primary, fallback, aisp_indicators):
        result = await FallbackIndicatorSource(primary, fallback).get_indicators("AISP")

        assert result is aisp_indicators
        fallback.get_indicators.assert_awaited_once_with("AISP")
