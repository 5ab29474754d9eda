"""Tests for watchlist persistence."""

import json
import sys

import pytest

sys.path.append("src")
from quantleap.services.watchlist import WatchlistStore, default_state


@pytest.fixture
def store(tmp_path):
    return WatchlistStore(tmp_path / "watchlist.json")


class TestLoad:
    def test_missing_file_gives_defaults(self, store):
        state = store.load()

        assert [tab.id for tab in state.tabs] == [
            "ai-megatrend",
            "semiconductor",
            "my-watchlist",
        ]
        assert state.active_tab_id == "ai-megatrend"
        assert store.active_tickers() == ["AISP", "AXTI", "BBAI", "GRRR"]

    def test_corrupt_file_gives_defaults(self, store):
        store.path.write_text("{not json", encoding="utf-8")

        assert store.load() == default_state()

    def test_invalid_shape_gives_defaults(self, store):
        store.path.write_text(json.dumps({"tabs": "nope"}), encoding="utf-8")

        assert store.load() == default_state()

    def test_empty_tabs_gives_defaults(self, store):
        store.path.write_text(
            json.dumps({"tabs": [], "active_tab_id": "x"}), encoding="utf-8"
        )

        assert store.load() == default_state()

    def test_unknown_active_tab_uses_first(self, store):
        state = default_state()
        state.active_tab_id = "gone"
        store.save(state)

        assert store.active_tab().id == "ai-megatrend"


class TestActiveTickers:
    def test_normalized_and_deduplicated(self, store):
        state = default_state()
        state.tabs[0].tickers = ["aisp", "AISP", " bbai ", ""]
        store.save(state)

        assert store.active_tickers() == ["AISP", "BBAI"]


class TestEdits:
    def test_add_ticker_persists(self, store):
        store.add_ticker("my-watchlist", "poet")

        reloaded = store.load()
        assert reloaded.tabs[2].tickers == ["POET"]

    def test_add_existing_ticker_is_noop(self, store):
        state = store.add_ticker("ai-megatrend", "aisp")

        assert state.tabs[0].tickers.count("AISP") == 1

    def test_remove_ticker_clears_selection(self, store):
        state = default_state()
        state.selected_ticker = "BBAI"
        store.save(state)

        store.remove_ticker("ai-megatrend", "bbai")

        reloaded = store.load()
        assert "BBAI" not in reloaded.tabs[0].tickers
        assert reloaded.selected_ticker is None

    def test_unknown_tab_raises(self, store):
        with pytest.raises(KeyError):
            store.add_ticker("missing", "AISP")

    def test_invalid_ticker_raises(self, store):
        with pytest.raises(ValueError):
            store.add_ticker("my-watchlist", "  ")
