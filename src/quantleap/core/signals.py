"""
Technical indicator signal engine.

Five indicators are evaluated independently and aggregated by weight:

    RSI(14)          20
    MACD             25
    Bollinger Bands  15
    Ichimoku         25
    SMA              15

buy_score >= 60 -> BUY, else sell_score >= 60 -> SELL, else WATCH.
"""

import math

from .models import (
    BollingerBands,
    CompositeSignal,
    IchimokuData,
    IndicatorSignal,
    Indicators,
    MACDData,
    OverallSignal,
    SignalDirection,
    SMAData,
)

RSI_WEIGHT = 20
MACD_WEIGHT = 25
BOLLINGER_WEIGHT = 15
ICHIMOKU_WEIGHT = 25
SMA_WEIGHT = 15

OVERALL_THRESHOLD = 60
MACD_STRONG_HISTOGRAM = 0.5

# sma50 and sma200 closer than this count as converged (0.0 = exact equality).
SMA_CONVERGENCE_EPSILON = 0.0


def _round_to(value: float, digits: int) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def evaluate_rsi(rsi: float) -> IndicatorSignal:
    """
    RSI(14): below 30 is oversold (BUY), above 70 is overbought (SELL).

    The neutral range is split into a lower band [30, 40), an upper band
    (60, 70] and the undecided middle.
    """
    rounded = _round_to(rsi, 1)

    if rsi < 30:
        signal, reason = (
            SignalDirection.BUY,
            f"RSI {rounded} - oversold, rebound possible",
        )
    elif rsi > 70:
        signal, reason = (
            SignalDirection.SELL,
            f"RSI {rounded} - overbought, pullback possible",
        )
    elif rsi < 40:
        signal, reason = (
            SignalDirection.NEUTRAL,
            f"RSI {rounded} - lower neutral, approaching buy interest",
        )
    elif rsi > 60:
        signal, reason = (
            SignalDirection.NEUTRAL,
            f"RSI {rounded} - upper neutral, approaching overbought caution",
        )
    else:
        signal, reason = (
            SignalDirection.NEUTRAL,
            f"RSI {rounded} - neutral, direction undecided",
        )

    return IndicatorSignal(
        name="RSI(14)", weight=RSI_WEIGHT, signal=signal, reason=reason
    )


def evaluate_macd(macd: MACDData) -> IndicatorSignal:
    """MACD: golden cross is BUY, dead cross is SELL, anything else is NEUTRAL."""
    histogram = macd.histogram
    hist_rounded = _round_to(histogram, 3)
    strength = "strong" if abs(histogram) > MACD_STRONG_HISTOGRAM else "early"

    if histogram > 0 and macd.macd > macd.signal:
        return IndicatorSignal(
            name="MACD",
            weight=MACD_WEIGHT,
            signal=SignalDirection.BUY,
            reason=(
                f"MACD golden cross (histogram {hist_rounded}) - "
                f"{strength} upward momentum"
            ),
        )

    if histogram < 0 and macd.macd < macd.signal:
        return IndicatorSignal(
            name="MACD",
            weight=MACD_WEIGHT,
            signal=SignalDirection.SELL,
            reason=(
                f"MACD dead cross (histogram {hist_rounded}) - "
                f"{strength} downward momentum"
            ),
        )

    return IndicatorSignal(
        name="MACD",
        weight=MACD_WEIGHT,
        signal=SignalDirection.NEUTRAL,
        reason=(
            f"MACD histogram {hist_rounded} - crossover imminent, "
            "awaiting direction"
        ),
    )


def evaluate_bollinger(price: float, bb: BollingerBands) -> IndicatorSignal:
    """Bollinger Bands: break below the lower band is BUY, above the upper is SELL."""
    if price < bb.lower:
        deviation = (bb.lower - price) / bb.lower * 100 if bb.lower else 0.0
        return IndicatorSignal(
            name="Bollinger Bands",
            weight=BOLLINGER_WEIGHT,
            signal=SignalDirection.BUY,
            reason=(
                f"Price ${price:.2f} below lower band (${bb.lower:.2f}, "
                f"{deviation:.1f}% out) - rebound expected"
            ),
        )

    if price > bb.upper:
        deviation = (price - bb.upper) / bb.upper * 100 if bb.upper else 0.0
        return IndicatorSignal(
            name="Bollinger Bands",
            weight=BOLLINGER_WEIGHT,
            signal=SignalDirection.SELL,
            reason=(
                f"Price ${price:.2f} above upper band (${bb.upper:.2f}, "
                f"{deviation:.1f}% out) - overheated"
            ),
        )

    band_width = bb.upper - bb.lower
    position = (price - bb.lower) / band_width * 100 if band_width > 0 else 50.0
    pos = int(_round_to(position, 0))

    if position < 30:
        reason = f"Band position {pos}% - near lower band, buy interest"
    elif position > 70:
        reason = f"Band position {pos}% - near upper band, consider profit-taking"
    else:
        reason = f"Band position {pos}% - mid-band, normal range"

    return IndicatorSignal(
        name="Bollinger Bands",
        weight=BOLLINGER_WEIGHT,
        signal=SignalDirection.NEUTRAL,
        reason=reason,
    )


def evaluate_ichimoku(price: float, ichimoku: IchimokuData) -> IndicatorSignal:
    """Ichimoku: above the cloud is BUY, below is SELL, inside is NEUTRAL."""
    cloud_top = max(ichimoku.senkou_a, ichimoku.senkou_b)
    cloud_bottom = min(ichimoku.senkou_a, ichimoku.senkou_b)

    if price > ichimoku.senkou_a and price > ichimoku.senkou_b:
        above = (price - cloud_top) / cloud_top * 100 if cloud_top else 0.0
        if ichimoku.tenkan > ichimoku.kijun:
            cross = "tenkan above kijun (confirms strength)"
        else:
            cross = "tenkan below kijun (caution)"
        return IndicatorSignal(
            name="Ichimoku",
            weight=ICHIMOKU_WEIGHT,
            signal=SignalDirection.BUY,
            reason=f"{above:.1f}% above cloud - {cross}, uptrend intact",
        )

    if price < ichimoku.senkou_a and price < ichimoku.senkou_b:
        below = (cloud_bottom - price) / cloud_bottom * 100 if cloud_bottom else 0.0
        if ichimoku.tenkan < ichimoku.kijun:
            cross = "tenkan below kijun (confirms weakness)"
        else:
            cross = "tenkan above kijun (rebound signs)"
        return IndicatorSignal(
            name="Ichimoku",
            weight=ICHIMOKU_WEIGHT,
            signal=SignalDirection.SELL,
            reason=f"{below:.1f}% below cloud - {cross}, downtrend",
        )

    cloud_width = cloud_top - cloud_bottom
    position = (
        int(_round_to((price - cloud_bottom) / cloud_width * 100, 0))
        if cloud_width > 0
        else 50
    )
    return IndicatorSignal(
        name="Ichimoku",
        weight=ICHIMOKU_WEIGHT,
        signal=SignalDirection.NEUTRAL,
        reason=f"Inside cloud at {position}% - awaiting breakout",
    )


def evaluate_sma(price: float, sma: SMAData) -> IndicatorSignal:
    """SMA: sma50 over sma200 is a golden cross (BUY), under is a dead cross (SELL)."""
    gap = (sma.sma50 - sma.sma200) / sma.sma200 * 100 if sma.sma200 else 0.0
    converged = abs(sma.sma50 - sma.sma200) <= SMA_CONVERGENCE_EPSILON

    if not converged and sma.sma50 > sma.sma200:
        if price > sma.sma20:
            momentum = "short-term momentum confirms"
        else:
            momentum = "short-term pullback, mid-term trend intact"
        return IndicatorSignal(
            name="SMA",
            weight=SMA_WEIGHT,
            signal=SignalDirection.BUY,
            reason=(
                f"SMA50 (${sma.sma50:.2f}) > SMA200 (${sma.sma200:.2f}) "
                f"golden cross (+{gap:.2f}%) - {momentum}"
            ),
        )

    if not converged and sma.sma50 < sma.sma200:
        if price < sma.sma20:
            momentum = "short-term decline accelerating"
        else:
            momentum = "short-term rebound attempt, mid-term weak"
        return IndicatorSignal(
            name="SMA",
            weight=SMA_WEIGHT,
            signal=SignalDirection.SELL,
            reason=(
                f"SMA50 (${sma.sma50:.2f}) < SMA200 (${sma.sma200:.2f}) "
                f"dead cross ({gap:.2f}%) - {momentum}"
            ),
        )

    return IndicatorSignal(
        name="SMA",
        weight=SMA_WEIGHT,
        signal=SignalDirection.NEUTRAL,
        reason="SMA50 ~ SMA200 - convergence, reversal may be near",
    )


def calculate_composite_signal(price: float, indicators: Indicators) -> CompositeSignal:
    """
    Aggregate the five indicator signals into a BUY/SELL/WATCH classification.

    Args:
        price: Current price
        indicators: Complete indicator set

    Returns:
        CompositeSignal with scores and signals in RSI, MACD, Bollinger,
        Ichimoku, SMA order
    """
    signals = (
        evaluate_rsi(indicators.rsi),
        evaluate_macd(indicators.macd),
        evaluate_bollinger(price, indicators.bollinger_bands),
        evaluate_ichimoku(price, indicators.ichimoku),
        evaluate_sma(price, indicators.sma),
    )

    buy_score = sum(s.weight for s in signals if s.signal == SignalDirection.BUY)
    sell_score = sum(s.weight for s in signals if s.signal == SignalDirection.SELL)

    # BUY is checked first so it wins if both ever cross the threshold.
    if buy_score >= OVERALL_THRESHOLD:
        overall = OverallSignal.BUY
    elif sell_score >= OVERALL_THRESHOLD:
        overall = OverallSignal.SELL
    else:
        overall = OverallSignal.WATCH

    return CompositeSignal(
        overall=overall,
        buy_score=buy_score,
        sell_score=sell_score,
        indicators=signals,
    )
