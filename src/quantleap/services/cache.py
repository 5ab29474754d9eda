"""Field-scoped TTL cache shared by the fetch layer and its consumers."""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple


class DataField(Enum):
    """Fetchable data fields; also the first half of every cache key."""

    QUOTE = "quote"
    CANDLES = "candles"
    NEWS = "news"
    RSI = "rsi"
    MACD = "macd"
    BBANDS = "bbands"
    SMA = "sma"
    INDICATORS = "indicators"


DEFAULT_TTLS: Dict[DataField, float] = {
    DataField.QUOTE: 60,
    DataField.CANDLES: 3600,
    DataField.NEWS: 1800,
    DataField.RSI: 3600,
    DataField.MACD: 3600,
    DataField.BBANDS: 3600,
    DataField.SMA: 3600,
    DataField.INDICATORS: 3600,
}

CacheKey = Tuple[DataField, str]


@dataclass(frozen=True)
class CacheEntry:
    key: CacheKey
    value: Any
    timestamp: float


class TTLCache:
    """
    Process-scoped mapping of (field, ticker) to the last fetched value.

    Entries are never evicted; a read treats an entry as missing once its
    field's TTL has elapsed. Writes always overwrite (last write wins).
    """

    def __init__(
        self,
        ttls: Optional[Mapping[DataField, float]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._ttls: Dict[DataField, float] = dict(DEFAULT_TTLS)
        if ttls:
            self._ttls.update(ttls)
        self._clock = clock
        self._entries: Dict[CacheKey, CacheEntry] = {}

    def ttl_for(self, field: DataField) -> float:
        return self._ttls[field]

    def get(self, field: DataField, ticker: str) -> Optional[Any]:
        """Return the cached value if it is younger than the field's TTL."""
        entry = self._entries.get((field, ticker))
        if entry is None:
            return None
        if self._clock() - entry.timestamp < self._ttls[field]:
            return entry.value
        return None

    def set(self, field: DataField, ticker: str, value: Any) -> None:
        key = (field, ticker)
        self._entries[key] = CacheEntry(key=key, value=value, timestamp=self._clock())

    def entry(self, field: DataField, ticker: str) -> Optional[CacheEntry]:
        """Raw entry regardless of staleness."""
        return self._entries.get((field, ticker))

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
