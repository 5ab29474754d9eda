"""Indicator sources used by the scan and the detail view."""

from typing import Optional

from ..config.logging import get_logger
from ..core.models import Indicators
from ..providers.base import MarketDataProvider

logger = get_logger(__name__)


class FallbackIndicatorSource:
    """Live indicators when complete, otherwise the fallback provider's set."""

    def __init__(self, primary: MarketDataProvider, fallback: MarketDataProvider):
        self.primary = primary
        self.fallback = fallback
        self.logger = logger.bind(service="indicator_source")

    async def get_indicators(self, ticker: str) -> Optional[Indicators]:
        indicators = await self.primary.get_indicators(ticker)
        if indicators is not None:
            return indicators

        self.logger.info("Using fallback indicators", ticker=ticker)
        return await self.fallback.get_indicators(ticker)
