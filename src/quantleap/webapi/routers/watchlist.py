"""Watchlist endpoints."""

from fastapi import APIRouter, Depends, Request

from ...config.logging import get_logger
from ...services.watchlist import WatchlistStore
from ..dependencies import get_watchlist_store
from ..exceptions import NotFoundError, ValidationException
from ..models.responses import StatusResponse

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/watchlist",
    response_model=StatusResponse,
    summary="Get Watchlist",
    description="Tabs, active tab and the tickers the scan will visit",
)
async def get_watchlist(
    request: Request, store: WatchlistStore = Depends(get_watchlist_store)
):
    request_id = getattr(request.state, "request_id", None)
    state = store.load()
    active = store.active_tab(state)

    return StatusResponse.create(
        data={
            "active_tab_id": active.id,
            "active_tickers": store.active_tickers(),
            "tabs": [tab.model_dump() for tab in state.tabs],
        },
        request_id=request_id,
    )


@router.post(
    "/watchlist/{tab_id}/tickers/{ticker}",
    response_model=StatusResponse,
    summary="Add Ticker",
)
async def add_ticker(
    tab_id: str,
    ticker: str,
    request: Request,
    store: WatchlistStore = Depends(get_watchlist_store),
):
    request_id = getattr(request.state, "request_id", None)
    try:
        state = store.add_ticker(tab_id, ticker)
    except KeyError:
        raise NotFoundError("Tab", tab_id, request_id=request_id)
    except ValueError as e:
        raise ValidationException(str(e), request_id=request_id)

    tab = next(t for t in state.tabs if t.id == tab_id)
    return StatusResponse.create(data=tab.model_dump(), request_id=request_id)


@router.delete(
    "/watchlist/{tab_id}/tickers/{ticker}",
    response_model=StatusResponse,
    summary="Remove Ticker",
)
async def remove_ticker(
    tab_id: str,
    ticker: str,
    request: Request,
    store: WatchlistStore = Depends(get_watchlist_store),
):
    request_id = getattr(request.state, "request_id", None)
    try:
        state = store.remove_ticker(tab_id, ticker)
    except KeyError:
        raise NotFoundError("Tab", tab_id, request_id=request_id)
    except ValueError as e:
        raise ValidationException(str(e), request_id=request_id)

    tab = next(t for t in state.tabs if t.id == tab_id)
    return StatusResponse.create(data=tab.model_dump(), request_id=request_id)
