"""Alpha Vantage client: technical indicators and the daily series fallback."""

from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from ..config.logging import get_logger
from ..core.models import BollingerBands, Candle, MACDData, normalize_ticker
from .errors import (
    DataShapeError,
    ProviderError,
    ProviderRejectedError,
    RateLimitedError,
)
from .http import fetch_json
from .rate_gate import RateGate
from .schemas import (
    AV_ERROR_KEY,
    AV_RATE_LIMIT_KEYS,
    parse_bbands,
    parse_daily_series,
    parse_macd,
    parse_rsi,
    parse_sma,
)

logger = get_logger(__name__)

PROVIDER = "alpha_vantage"
SMA_PERIODS = (20, 50, 200)

T = TypeVar("T")


class AlphaVantageClient:
    """
    Indicator provider with a strict per-minute quota.

    Every request first passes through the shared RateGate. A ``Note`` or
    ``Information`` key in the body is a soft rate-limit failure.
    """

    def __init__(
        self,
        api_key: Optional[str],
        gate: RateGate,
        base_url: str = "https://www.alphavantage.co/query",
        timeout_seconds: float = 10.0,
    ):
        self.api_key = api_key
        self.gate = gate
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.logger = logger.bind(provider=PROVIDER)

    async def _query(self, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise ProviderRejectedError(PROVIDER, "API key not configured")

        await self.gate.acquire()
        payload = await fetch_json(
            PROVIDER,
            self.base_url,
            dict(params, apikey=self.api_key),
            self.timeout_seconds,
        )

        if not isinstance(payload, dict):
            raise DataShapeError(PROVIDER, "Expected a JSON object")
        for key in AV_RATE_LIMIT_KEYS:
            if key in payload:
                raise RateLimitedError(PROVIDER, str(payload[key])[:200])
        if AV_ERROR_KEY in payload:
            raise ProviderRejectedError(PROVIDER, str(payload[AV_ERROR_KEY])[:200])
        return payload

    async def _fetch(
        self,
        operation: str,
        symbol: str,
        params: Dict[str, Any],
        parse: Callable[[str, Dict[str, Any]], T],
    ) -> Optional[T]:
        try:
            payload = await self._query(params)
            return parse(PROVIDER, payload)
        except ProviderError as e:
            self.logger.warning(
                "Provider fetch failed",
                operation=operation,
                symbol=symbol,
                failure=e.category.value,
                error=e.message,
            )
            return None

    async def get_rsi(self, ticker: str, period: int = 14) -> Optional[float]:
        symbol = normalize_ticker(ticker)
        return await self._fetch(
            "rsi",
            symbol,
            {
                "function": "RSI",
                "symbol": symbol,
                "interval": "daily",
                "time_period": period,
                "series_type": "close",
            },
            parse_rsi,
        )

    async def get_macd(self, ticker: str) -> Optional[MACDData]:
        symbol = normalize_ticker(ticker)
        return await self._fetch(
            "macd",
            symbol,
            {
                "function": "MACD",
                "symbol": symbol,
                "interval": "daily",
                "series_type": "close",
            },
            parse_macd,
        )

    async def get_bbands(
        self, ticker: str, period: int = 20
    ) -> Optional[BollingerBands]:
        symbol = normalize_ticker(ticker)
        return await self._fetch(
            "bbands",
            symbol,
            {
                "function": "BBANDS",
                "symbol": symbol,
                "interval": "daily",
                "time_period": period,
                "series_type": "close",
            },
            parse_bbands,
        )

    async def get_sma(self, ticker: str, period: int) -> Optional[float]:
        symbol = normalize_ticker(ticker)
        return await self._fetch(
            f"sma{period}",
            symbol,
            {
                "function": "SMA",
                "symbol": symbol,
                "interval": "daily",
                "time_period": period,
                "series_type": "close",
            },
            parse_sma,
        )

    async def get_daily_candles(
        self, ticker: str, limit: int = 30
    ) -> Optional[Tuple[Candle, ...]]:
        """Compact daily series trimmed to the ``limit`` most recent bars, ascending."""
        symbol = normalize_ticker(ticker)
        return await self._fetch(
            "daily_series",
            symbol,
            {
                "function": "TIME_SERIES_DAILY",
                "symbol": symbol,
                "outputsize": "compact",
            },
            lambda provider, payload: parse_daily_series(provider, payload, limit),
        )
