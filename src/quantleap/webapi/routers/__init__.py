"""API routers for the Quant Leap endpoints."""

from .stocks import router as stocks_router
from .watchlist import router as watchlist_router

__all__ = ["stocks_router", "watchlist_router"]
