"""Interface shared by the live market data service and synthetic data."""

from typing import Optional, Protocol, Sequence, Tuple

from ..core.models import Candle, Indicators, NewsItem, Quote


class MarketDataProvider(Protocol):
    """Read operations the scan and detail views depend on."""

    async def get_quote(self, ticker: str) -> Optional[Quote]:
        ...

    async def get_candles(self, ticker: str) -> Optional[Tuple[Candle, ...]]:
        ...

    async def get_indicators(self, ticker: str) -> Optional[Indicators]:
        ...

    async def get_news(self, ticker: str) -> Optional[Sequence[NewsItem]]:
        ...
