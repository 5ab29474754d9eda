"""FastAPI application exposing the scan trigger and market data endpoints."""

import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config.logging import get_logger
from ..config.settings import Settings, get_settings, validate_required_settings
from ..services.scanner import ScanOrchestrator
from ..services.watchlist import WatchlistStore
from .dependencies import get_scan_orchestrator, get_watchlist_store
from .exceptions import setup_exception_handlers
from .health import APP_VERSION
from .health import router as health_router
from .models.responses import ErrorResponse, ScanResponse
from .routers import stocks_router, watchlist_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Quant Leap API")

    missing = validate_required_settings()
    if missing:
        logger.warning("Missing configuration", missing=missing)

    yield

    logger.info("Quant Leap API shutdown completed")


# auto_error is off so a missing header is reported as 401, not 403
security = HTTPBearer(auto_error=False)


def verify_cron_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Verify the scheduler's bearer token against CRON_SECRET.

    Raises:
        HTTPException: 500 if no secret is configured, 401 if the token is
            missing or wrong
    """
    expected_token = settings.cron_secret
    if not expected_token:
        logger.error("Cron secret not configured")
        raise HTTPException(status_code=500, detail="CRON_SECRET not configured")

    if credentials is None or credentials.credentials != expected_token:
        logger.warning(
            "Invalid cron authentication attempt",
            token_provided=credentials is not None,
        )
        raise HTTPException(status_code=401, detail="Unauthorized")

    return credentials.credentials


async def add_request_id_middleware(request: Request, call_next):
    """Add unique request ID to each request for tracking."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    logger.info(
        "Request started",
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        query_params=str(request.query_params),
    )

    response = await call_next(request)

    response.headers["X-Request-ID"] = request_id

    logger.info(
        "Request completed",
        request_id=request_id,
        status_code=response.status_code,
        method=request.method,
        path=request.url.path,
    )

    return response


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Quant Leap API",
        description="""
        Equity watchlist monitor.

        * **Scan trigger**: hourly scan sending urgent news alerts and a signal summary
        * **Market data**: cached quotes, candles, news and technical indicators
        * **Watchlist**: tabs and tickers the scan visits
        """,
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.middleware("http")(add_request_id_middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(health_router, tags=["Health & Status"])
    app.include_router(stocks_router, prefix="/api", tags=["Market Data"])
    app.include_router(watchlist_router, prefix="/api", tags=["Watchlist"])

    @app.get(
        "/api/cron/alerts",
        response_model=ScanResponse,
        summary="Run Alert Scan",
        description="Scan the active watchlist and send Telegram alerts",
    )
    async def run_alert_scan(
        request: Request,
        token: str = Depends(verify_cron_secret),
        orchestrator: ScanOrchestrator = Depends(get_scan_orchestrator),
        store: WatchlistStore = Depends(get_watchlist_store),
    ):
        """
        Scheduled scan entry point.

        Per-ticker failures are reported in ``errors``; only a failure of
        the scan itself produces a 500.
        """
        request_id = request.state.request_id

        try:
            tickers = store.active_tickers()
            report = await orchestrator.run(tickers)
        except Exception as e:
            logger.error(
                "Alert scan failed",
                error=str(e),
                request_id=request_id,
                exc_info=True,
            )
            return JSONResponse(
                status_code=500,
                content=ErrorResponse(
                    error={
                        "type": "ScanFailed",
                        "message": "cron failed",
                        "details": str(e),
                        "status_code": 500,
                    },
                    request_id=request_id,
                ).model_dump(),
            )

        logger.info(
            "Alert scan completed",
            request_id=request_id,
            checked_tickers=report.checked_tickers,
            urgent_news_sent=report.urgent_news_sent,
            signals_sent=report.signals_sent,
            error_count=len(report.errors),
        )

        return ScanResponse(
            checked_tickers=report.checked_tickers,
            urgent_news_found=report.urgent_news_found,
            urgent_news_sent=report.urgent_news_sent,
            signals_sent=report.signals_sent,
            errors=report.errors,
            request_id=request_id,
        )

    logger.info("FastAPI application created")
    return app


# Create the app instance
app = create_app()
