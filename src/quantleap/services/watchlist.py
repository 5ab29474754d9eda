"""Watchlist persistence backed by a JSON file."""

import json
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from ..config.logging import get_logger
from ..core.models import normalize_ticker

logger = get_logger(__name__)


class Tab(BaseModel):
    id: str
    name: str
    order: int = 0
    tickers: List[str] = Field(default_factory=list)


class TeamNote(BaseModel):
    analyst: str
    note: str
    updated_at: Optional[str] = None


class WatchlistState(BaseModel):
    """Serialized watchlist blob."""

    tabs: List[Tab]
    active_tab_id: str
    selected_ticker: Optional[str] = None
    team_notes: Dict[str, List[TeamNote]] = Field(default_factory=dict)


def default_state() -> WatchlistState:
    return WatchlistState(
        tabs=[
            Tab(
                id="ai-megatrend",
                name="🔥 AI Megatrend",
                order=0,
                tickers=["AISP", "AXTI", "BBAI", "GRRR"],
            ),
            Tab(
                id="semiconductor",
                name="🔩 Semiconductor Supply Chain",
                order=1,
                tickers=["AXTI", "POET", "VECO", "ATOM"],
            ),
            Tab(id="my-watchlist", name="⭐ My Watchlist", order=2, tickers=[]),
        ],
        active_tab_id="ai-megatrend",
    )


class WatchlistStore:
    """
    Loads and saves the watchlist blob.

    A missing, unreadable or empty blob falls back to the default tabs.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.logger = logger.bind(service="watchlist")

    def load(self) -> WatchlistState:
        if not self.path.exists():
            return default_state()

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            state = WatchlistState.model_validate(raw)
        except (OSError, ValueError, ValidationError) as e:
            self.logger.warning(
                "Unreadable watchlist, using defaults", path=str(self.path), error=str(e)
            )
            return default_state()

        if not state.tabs:
            return default_state()
        return state

    def save(self, state: WatchlistState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(state.model_dump_json(indent=2), encoding="utf-8")

    def active_tab(self, state: Optional[WatchlistState] = None) -> Tab:
        state = state or self.load()
        for tab in state.tabs:
            if tab.id == state.active_tab_id:
                return tab
        return state.tabs[0]

    def active_tickers(self) -> List[str]:
        """Uppercase tickers of the active tab, de-duplicated in order."""
        tickers: List[str] = []
        for ticker in self.active_tab().tickers:
            try:
                symbol = normalize_ticker(ticker)
            except ValueError:
                continue
            if symbol not in tickers:
                tickers.append(symbol)
        return tickers

    def _find_tab(self, state: WatchlistState, tab_id: str) -> Tab:
        for tab in state.tabs:
            if tab.id == tab_id:
                return tab
        raise KeyError(f"Unknown tab: {tab_id}")

    def add_ticker(self, tab_id: str, ticker: str) -> WatchlistState:
        state = self.load()
        tab = self._find_tab(state, tab_id)
        symbol = normalize_ticker(ticker)
        if symbol not in tab.tickers:
            tab.tickers.append(symbol)
            self.save(state)
            self.logger.info("Ticker added", tab_id=tab_id, ticker=symbol)
        return state

    def remove_ticker(self, tab_id: str, ticker: str) -> WatchlistState:
        state = self.load()
        tab = self._find_tab(state, tab_id)
        symbol = normalize_ticker(ticker)
        tab.tickers = [t for t in tab.tickers if t != symbol]
        if state.selected_ticker == symbol:
            state.selected_ticker = None
        self.save(state)
        self.logger.info("Ticker removed", tab_id=tab_id, ticker=symbol)
        return state
