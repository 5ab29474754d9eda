"""Process-wide service instances for the API and the CLI."""

from functools import lru_cache

from ..comm.telegram import TelegramBot
from ..config.settings import get_settings
from ..core.synthetic import SyntheticMarketData
from ..providers.alpha_vantage import AlphaVantageClient
from ..providers.finnhub import FinnhubClient
from ..providers.rate_gate import RateGate
from ..services.cache import DataField, TTLCache
from ..services.detail import DetailViewLoader
from ..services.indicators import FallbackIndicatorSource
from ..services.market_data import MarketDataService
from ..services.notification import AlertDispatcher
from ..services.scanner import IndicatorSource, ScanOrchestrator
from ..services.watchlist import WatchlistStore


@lru_cache()
def get_cache() -> TTLCache:
    settings = get_settings()
    indicator_ttl = settings.indicators_ttl_seconds
    return TTLCache(
        ttls={
            DataField.QUOTE: settings.quote_ttl_seconds,
            DataField.CANDLES: settings.candles_ttl_seconds,
            DataField.NEWS: settings.news_ttl_seconds,
            DataField.RSI: indicator_ttl,
            DataField.MACD: indicator_ttl,
            DataField.BBANDS: indicator_ttl,
            DataField.SMA: indicator_ttl,
            DataField.INDICATORS: indicator_ttl,
        }
    )


@lru_cache()
def get_market_data_service() -> MarketDataService:
    settings = get_settings()
    finnhub = FinnhubClient(
        settings.finnhub_api_key,
        base_url=settings.finnhub_base_url,
        timeout_seconds=settings.http_timeout_seconds,
    )
    alpha_vantage = AlphaVantageClient(
        settings.alpha_vantage_api_key,
        gate=RateGate(settings.alpha_vantage_min_interval_seconds, name="alpha_vantage"),
        base_url=settings.alpha_vantage_base_url,
        timeout_seconds=settings.http_timeout_seconds,
    )
    return MarketDataService(
        finnhub,
        alpha_vantage,
        get_cache(),
        news_lookback_days=settings.news_lookback_days,
        news_limit=settings.news_limit,
    )


@lru_cache()
def get_synthetic_data() -> SyntheticMarketData:
    return SyntheticMarketData()


@lru_cache()
def get_live_indicator_source() -> FallbackIndicatorSource:
    """Live indicators with the synthetic set as fallback."""
    return FallbackIndicatorSource(get_market_data_service(), get_synthetic_data())


def get_scan_indicator_source() -> IndicatorSource:
    if get_settings().scan_indicator_source == "live":
        return get_live_indicator_source()
    return get_synthetic_data()


@lru_cache()
def get_alert_dispatcher() -> AlertDispatcher:
    settings = get_settings()
    bot = TelegramBot(
        settings.telegram_bot_token,
        settings.telegram_chat_id,
        timeout_seconds=settings.http_timeout_seconds,
    )
    return AlertDispatcher(bot)


@lru_cache()
def get_watchlist_store() -> WatchlistStore:
    return WatchlistStore(get_settings().watchlist_path)


def get_scan_orchestrator() -> ScanOrchestrator:
    settings = get_settings()
    return ScanOrchestrator(
        get_market_data_service(),
        get_scan_indicator_source(),
        get_alert_dispatcher(),
        ticker_pacing_seconds=settings.ticker_pacing_seconds,
        news_alert_pacing_seconds=settings.news_alert_pacing_seconds,
    )


def get_detail_loader() -> DetailViewLoader:
    return DetailViewLoader(
        get_market_data_service(),
        get_live_indicator_source(),
        fallback=get_synthetic_data(),
    )
