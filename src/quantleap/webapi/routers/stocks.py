"""Per-ticker market data endpoints backed by the cache layer."""

from dataclasses import asdict, is_dataclass
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ...config.logging import get_logger
from ...core.models import IndicatorSnapshot, NewsItem, normalize_ticker
from ...core.synthetic import SyntheticMarketData
from ...services.cache import DataField
from ...services.detail import DetailViewLoader
from ...services.market_data import MarketDataService
from ..dependencies import (
    get_detail_loader,
    get_market_data_service,
    get_synthetic_data,
)
from ..exceptions import ExternalServiceError, NotFoundError, ValidationException
from ..models.responses import StatusResponse

logger = get_logger(__name__)

router = APIRouter()

FIELD_TYPES = {field.value: field for field in DataField}


def serialize_field(value: Any) -> Any:
    """Convert fetched domain objects into JSON-ready structures."""
    if isinstance(value, (list, tuple)):
        return [serialize_field(item) for item in value]
    if isinstance(value, (NewsItem, IndicatorSnapshot)):
        return value.to_dict()
    if is_dataclass(value):
        return asdict(value)
    return value


@router.get(
    "/stock/{ticker}",
    response_model=StatusResponse,
    summary="Get Stock Data",
    description="Fetch one data field for a ticker through the cache",
)
async def get_stock_field(
    ticker: str,
    request: Request,
    type: str = Query("quote", description="Field to fetch"),
    market_data: MarketDataService = Depends(get_market_data_service),
):
    """
    Fetch a single field for a ticker.

    - **type**: quote, candles, news, rsi, macd, bbands, sma or indicators
    """
    request_id = getattr(request.state, "request_id", None)

    field = FIELD_TYPES.get(type)
    if field is None:
        raise HTTPException(status_code=400, detail=f"unknown type: {type}")

    try:
        symbol = normalize_ticker(ticker)
    except ValueError as e:
        raise ValidationException(str(e), request_id=request_id)

    logger.info("Stock data requested", symbol=symbol, type=type, request_id=request_id)

    value = await market_data.fetch(field, symbol)

    if value is None:
        if field == DataField.CANDLES:
            raise NotFoundError("Candle data", symbol, request_id=request_id)
        if field == DataField.NEWS:
            value = []
        else:
            raise ExternalServiceError(
                "market_data", f"{type} fetch", f"no data for {symbol}", request_id
            )

    return StatusResponse.create(
        data={"ticker": symbol, "type": type, "value": serialize_field(value)},
        request_id=request_id,
    )


@router.get(
    "/stock/{ticker}/detail",
    response_model=StatusResponse,
    summary="Get Stock Detail",
    description="Candles, indicators, news and composite signal for one ticker",
)
async def get_stock_detail(
    ticker: str,
    request: Request,
    loader: DetailViewLoader = Depends(get_detail_loader),
):
    request_id = getattr(request.state, "request_id", None)

    try:
        view = await loader.load(ticker)
    except ValueError as e:
        raise ValidationException(str(e), request_id=request_id)

    if not view.has_data:
        raise NotFoundError("Price data", view.ticker, request_id=request_id)

    return StatusResponse.create(data=view.to_dict(), request_id=request_id)


@router.get(
    "/stocks/search",
    response_model=StatusResponse,
    summary="Search Tickers",
    description="Seed tickers whose symbol, name or sector contains the query",
)
async def search_stocks(
    request: Request,
    q: str = Query("", description="Case-insensitive search text"),
    synthetic: SyntheticMarketData = Depends(get_synthetic_data),
):
    request_id = getattr(request.state, "request_id", None)
    matches = synthetic.search(q)

    return StatusResponse.create(
        data={
            "query": q,
            "results": [
                {"ticker": s.ticker, "name": s.name, "sector": s.sector}
                for s in matches
            ],
        },
        request_id=request_id,
    )
