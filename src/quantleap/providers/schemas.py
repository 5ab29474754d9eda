"""Typed response schemas validated at the provider boundary."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..core.models import BollingerBands, Candle, MACDData, Quote
from .errors import DataShapeError

M = TypeVar("M", bound=BaseModel)


def validate_payload(provider: str, model: Type[M], payload: Any) -> M:
    """Validate a decoded payload, converting failures to DataShapeError."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise DataShapeError(provider, f"{model.__name__}: {e.error_count()} errors")


# ── Finnhub ──


class FinnhubQuote(BaseModel):
    model_config = ConfigDict(extra="ignore")

    c: float
    d: Optional[float] = None
    dp: Optional[float] = None
    h: Optional[float] = None
    l: Optional[float] = None
    o: Optional[float] = None
    pc: Optional[float] = None

    def to_quote(self) -> Quote:
        return Quote(
            price=self.c,
            change=self.d or 0.0,
            change_percent=self.dp or 0.0,
            high=self.h or 0.0,
            low=self.l or 0.0,
            open=self.o or 0.0,
            prev_close=self.pc or 0.0,
        )


class FinnhubCandles(BaseModel):
    model_config = ConfigDict(extra="ignore")

    s: Optional[str] = None
    error: Optional[str] = None
    t: List[int] = Field(default_factory=list)
    o: List[float] = Field(default_factory=list)
    h: List[float] = Field(default_factory=list)
    l: List[float] = Field(default_factory=list)
    c: List[float] = Field(default_factory=list)
    v: List[float] = Field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return self.s != "no_data" and not self.error and len(self.t) > 0

    def to_candles(self) -> Tuple[Candle, ...]:
        lengths = {len(self.t), len(self.o), len(self.h), len(self.l), len(self.c)}
        if len(lengths) != 1:
            raise DataShapeError("finnhub", "Candle arrays have mismatched lengths")
        volumes = self.v if len(self.v) == len(self.t) else [0] * len(self.t)
        return tuple(
            Candle(
                date=datetime.fromtimestamp(ts, tz=timezone.utc).date().isoformat(),
                open=self.o[i],
                high=self.h[i],
                low=self.l[i],
                close=self.c[i],
                volume=int(volumes[i]),
            )
            for i, ts in enumerate(self.t)
        )


class FinnhubArticle(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    headline: Optional[str] = None
    summary: Optional[str] = None
    source: Optional[str] = None
    url: Optional[str] = None
    datetime: Optional[int] = None


_ARTICLE_LIST = TypeAdapter(List[FinnhubArticle])


def validate_articles(provider: str, payload: Any) -> List[FinnhubArticle]:
    try:
        return _ARTICLE_LIST.validate_python(payload)
    except ValidationError as e:
        raise DataShapeError(provider, f"Article list: {e.error_count()} errors")


# ── Alpha Vantage ──

AV_RATE_LIMIT_KEYS = ("Note", "Information")
AV_ERROR_KEY = "Error Message"

_SERIES = TypeAdapter(Dict[str, Dict[str, str]])


def _latest_row(provider: str, payload: Dict[str, Any], key: str) -> Dict[str, str]:
    if key not in payload:
        raise DataShapeError(provider, f"Missing '{key}'")
    try:
        series = _SERIES.validate_python(payload[key])
    except ValidationError as e:
        raise DataShapeError(provider, f"'{key}': {e.error_count()} errors")
    if not series:
        raise DataShapeError(provider, f"'{key}' is empty")
    return series[max(series)]


def _number(provider: str, row: Dict[str, str], field: str) -> float:
    try:
        return float(row[field])
    except (KeyError, ValueError):
        raise DataShapeError(provider, f"Field '{field}' missing or not numeric")


def parse_rsi(provider: str, payload: Dict[str, Any]) -> float:
    row = _latest_row(provider, payload, "Technical Analysis: RSI")
    return _number(provider, row, "RSI")


def parse_macd(provider: str, payload: Dict[str, Any]) -> MACDData:
    row = _latest_row(provider, payload, "Technical Analysis: MACD")
    return MACDData(
        macd=_number(provider, row, "MACD"),
        signal=_number(provider, row, "MACD_Signal"),
        histogram=_number(provider, row, "MACD_Hist"),
    )


def parse_bbands(provider: str, payload: Dict[str, Any]) -> BollingerBands:
    row = _latest_row(provider, payload, "Technical Analysis: BBANDS")
    return BollingerBands(
        upper=_number(provider, row, "Real Upper Band"),
        middle=_number(provider, row, "Real Middle Band"),
        lower=_number(provider, row, "Real Lower Band"),
    )


def parse_sma(provider: str, payload: Dict[str, Any]) -> float:
    row = _latest_row(provider, payload, "Technical Analysis: SMA")
    return _number(provider, row, "SMA")


def parse_daily_series(
    provider: str, payload: Dict[str, Any], limit: int
) -> Tuple[Candle, ...]:
    """Most recent ``limit`` daily bars in ascending date order."""
    key = "Time Series (Daily)"
    if key not in payload:
        raise DataShapeError(provider, f"Missing '{key}'")
    try:
        series = _SERIES.validate_python(payload[key])
    except ValidationError as e:
        raise DataShapeError(provider, f"'{key}': {e.error_count()} errors")
    if not series:
        raise DataShapeError(provider, f"'{key}' is empty")

    dates = sorted(series)[-limit:]
    return tuple(
        Candle(
            date=day,
            open=_number(provider, series[day], "1. open"),
            high=_number(provider, series[day], "2. high"),
            low=_number(provider, series[day], "3. low"),
            close=_number(provider, series[day], "4. close"),
            volume=int(_number(provider, series[day], "5. volume")),
        )
        for day in dates
    )
