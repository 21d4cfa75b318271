"""
Technical Indicator Calculations

NumPy implementations of the indicators shown in ticker previews.
All functions are pure; arrays are aligned with the input (NaN until the
indicator has enough history).
"""

from typing import Optional

import numpy as np


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average."""
    result = np.full(len(data), np.nan)
    if period < 1 or len(data) < period:
        return result

    window_sums = np.convolve(data, np.ones(period), mode="valid")
    result[period - 1:] = window_sums / period
    return result


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """Exponential Moving Average, seeded with the SMA of the first window."""
    result = np.full(len(data), np.nan)

    # Skip leading NaNs (e.g. when smoothing another indicator)
    valid = np.flatnonzero(~np.isnan(data))
    if len(valid) == 0:
        return result
    start = valid[0]
    if len(data) - start < period:
        return result

    alpha = 2 / (period + 1)
    seed_index = start + period - 1
    result[seed_index] = np.mean(data[start:seed_index + 1])
    for i in range(seed_index + 1, len(data)):
        result[i] = (data[i] - result[i - 1]) * alpha + result[i - 1]
    return result


# =============================================================================
# MOMENTUM
# =============================================================================


def rsi(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """Relative Strength Index (Wilder smoothing)."""
    result = np.full(len(closes), np.nan)
    if len(closes) < period + 1:
        return result

    deltas = np.diff(closes)
    gains = np.clip(deltas, 0, None)
    losses = np.clip(-deltas, 0, None)

    avg_gain = gains[:period].mean()
    avg_loss = losses[:period].mean()

    for i in range(period, len(closes)):
        if i > period:
            avg_gain = (avg_gain * (period - 1) + gains[i - 1]) / period
            avg_loss = (avg_loss * (period - 1) + losses[i - 1]) / period
        result[i] = 100.0 if avg_loss == 0 else 100 - 100 / (1 + avg_gain / avg_loss)

    return result


def macd(
    closes: np.ndarray,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD.

    Returns: (macd_line, signal_line, histogram)
    """
    macd_line = ema(closes, fast_period) - ema(closes, slow_period)
    signal_line = ema(macd_line, signal_period)
    return macd_line, signal_line, macd_line - signal_line


def stochastic_k(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> np.ndarray:
    """Stochastic %K."""
    result = np.full(len(closes), np.nan)
    for i in range(period - 1, len(closes)):
        highest = highs[i - period + 1:i + 1].max()
        lowest = lows[i - period + 1:i + 1].min()
        result[i] = 50.0 if highest == lowest else (closes[i] - lowest) / (highest - lowest) * 100
    return result


# =============================================================================
# VOLATILITY
# =============================================================================


def true_range(highs: np.ndarray, lows: np.ndarray, closes: np.ndarray) -> np.ndarray:
    """True Range; the first bar uses its own high-low range."""
    if len(closes) == 0:
        return np.array([])
    prev_close = np.concatenate(([closes[0]], closes[:-1]))
    return np.maximum.reduce([
        highs - lows,
        np.abs(highs - prev_close),
        np.abs(lows - prev_close),
    ])


def atr(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> np.ndarray:
    """Average True Range (EMA of True Range)."""
    if len(closes) < 2:
        return np.full(len(closes), np.nan)
    return ema(true_range(highs, lows, closes), period)


def bollinger_percent_b(
    closes: np.ndarray, period: int = 20, std_dev: float = 2.0
) -> np.ndarray:
    """Position of the close within the Bollinger Bands (0 = lower, 1 = upper)."""
    result = np.full(len(closes), np.nan)
    middle = sma(closes, period)
    for i in range(period - 1, len(closes)):
        width = 2 * std_dev * np.std(closes[i - period + 1:i + 1])
        if width > 0:
            lower = middle[i] - width / 2
            result[i] = (closes[i] - lower) / width
    return result


# =============================================================================
# SNAPSHOT
# =============================================================================


def last_valid(arr: np.ndarray) -> Optional[float]:
    """Last non-NaN value, rounded for display."""
    valid = arr[~np.isnan(arr)]
    if len(valid) == 0:
        return None
    return round(float(valid[-1]), 4)


def indicator_snapshot(
    highs: np.ndarray,
    lows: np.ndarray,
    closes: np.ndarray,
) -> dict:
    """Latest value of every preview indicator."""
    macd_line, signal_line, histogram = macd(closes)
    return {
        "RSI": last_valid(rsi(closes)),
        "MACD": {
            "MACD": last_valid(macd_line),
            "signal": last_valid(signal_line),
            "histogram": last_valid(histogram),
        },
        "ATR": last_valid(atr(highs, lows, closes)),
        "BB_PB": last_valid(bollinger_percent_b(closes)),
        "STOCH_K": last_valid(stochastic_k(highs, lows, closes)),
        "EMA9": last_valid(ema(closes, 9)),
        "EMA20": last_valid(ema(closes, 20)),
        "EMA50": last_valid(ema(closes, 50)),
        "SMA50": last_valid(sma(closes, 50)),
    }
