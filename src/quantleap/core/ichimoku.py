"""Ichimoku cloud derived from a daily candle series."""

from typing import Sequence

from .models import Candle, IchimokuData

TENKAN_PERIOD = 9
KIJUN_PERIOD = 26
SENKOU_B_PERIOD = 52


def _high_low_midpoint(candles: Sequence[Candle]) -> float:
    return (max(c.high for c in candles) + min(c.low for c in candles)) / 2


def calculate_ichimoku(candles: Sequence[Candle]) -> IchimokuData:
    """
    Compute tenkan, kijun and both leading spans from ascending candles.

    Fewer than 26 candles yields the all-zero sentinel, which callers must
    treat as "unavailable". Senkou B uses the whole series when fewer than
    52 candles exist.
    """
    if len(candles) < KIJUN_PERIOD:
        return IchimokuData.unavailable()

    tenkan = _high_low_midpoint(candles[-TENKAN_PERIOD:])
    kijun = _high_low_midpoint(candles[-KIJUN_PERIOD:])
    senkou_a = (tenkan + kijun) / 2
    if len(candles) >= SENKOU_B_PERIOD:
        senkou_b = _high_low_midpoint(candles[-SENKOU_B_PERIOD:])
    else:
        senkou_b = _high_low_midpoint(candles)

    return IchimokuData(
        tenkan=tenkan, kijun=kijun, senkou_a=senkou_a, senkou_b=senkou_b
    )
