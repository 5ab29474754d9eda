"""Finnhub client: quotes, daily candles and company news."""

import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from ..config.logging import get_logger
from ..core.models import Candle, Quote, normalize_ticker
from .errors import DataShapeError, ProviderError, ProviderRejectedError
from .http import fetch_json
from .schemas import (
    FinnhubArticle,
    FinnhubCandles,
    FinnhubQuote,
    validate_articles,
    validate_payload,
)

logger = get_logger(__name__)

PROVIDER = "finnhub"
CANDLE_WINDOW_DAYS = 30


class FinnhubClient:
    """Primary market data provider. Public methods return None on failure."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://finnhub.io/api/v1",
        timeout_seconds: float = 10.0,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.logger = logger.bind(provider=PROVIDER)

    async def _get(self, path: str, params: Dict[str, Any]) -> Any:
        if not self.api_key:
            raise ProviderRejectedError(PROVIDER, "API key not configured")
        query = dict(params, token=self.api_key)
        return await fetch_json(
            PROVIDER, f"{self.base_url}{path}", query, self.timeout_seconds
        )

    def _log_failure(self, operation: str, symbol: str, error: ProviderError) -> None:
        self.logger.warning(
            "Provider fetch failed",
            operation=operation,
            symbol=symbol,
            failure=error.category.value,
            error=error.message,
        )

    async def get_quote(self, ticker: str) -> Optional[Quote]:
        """Fetch the latest quote; None when the symbol has no price."""
        symbol = normalize_ticker(ticker)
        try:
            payload = await self._get("/quote", {"symbol": symbol})
            quote = validate_payload(PROVIDER, FinnhubQuote, payload)
            if quote.c <= 0:
                raise DataShapeError(PROVIDER, "Quote has no price")
            return quote.to_quote()
        except ProviderError as e:
            self._log_failure("quote", symbol, e)
            return None

    async def get_candles(
        self,
        ticker: str,
        days: int = CANDLE_WINDOW_DAYS,
        now: Optional[float] = None,
    ) -> Optional[Tuple[Candle, ...]]:
        """
        Fetch daily candles for a trailing window.

        Returns None when the response is absent, marked ``no_data`` or
        carries an error field, so the caller can fall back.
        """
        symbol = normalize_ticker(ticker)
        to_ts = int(now if now is not None else time.time())
        from_ts = to_ts - days * 86400

        try:
            payload = await self._get(
                "/stock/candle",
                {"symbol": symbol, "resolution": "D", "from": from_ts, "to": to_ts},
            )
            candles = validate_payload(PROVIDER, FinnhubCandles, payload)
            if not candles.has_data:
                raise ProviderRejectedError(
                    PROVIDER, candles.error or f"status {candles.s!r}"
                )
            return candles.to_candles()
        except ProviderError as e:
            self._log_failure("candles", symbol, e)
            return None

    async def get_company_news(
        self,
        ticker: str,
        lookback_days: int = 7,
        limit: int = 10,
        now: Optional[datetime] = None,
    ) -> Optional[List[Dict[str, Any]]]:
        """Fetch up to ``limit`` raw articles published in the lookback window."""
        symbol = normalize_ticker(ticker)
        current = now or datetime.now(timezone.utc)
        to_date = current.date().isoformat()
        from_date = (current - timedelta(days=lookback_days)).date().isoformat()

        try:
            payload = await self._get(
                "/company-news",
                {"symbol": symbol, "from": from_date, "to": to_date},
            )
            articles: List[FinnhubArticle] = validate_articles(PROVIDER, payload)
            return [a.model_dump() for a in articles[:limit]]
        except ProviderError as e:
            self._log_failure("news", symbol, e)
            return None
