"""
Trade Suitability Scores

Deterministic 0-100 scores computed from a ticker preview. Higher is better.
Sub-scores default to a neutral 50 when the preview lacks the inputs.
"""

from typing import Any

from ranker.schemas.ranking import TradeMode

NEUTRAL = 50.0

SCALP_WEIGHTS = {
    "volatility": 0.30,
    "volume": 0.20,
    "technical": 0.35,
    "momentum": 0.15,
}

SWING_WEIGHTS = {
    "momentum": 0.30,
    "technical": 0.40,
    "volume": 0.15,
    "trend": 0.15,
}


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _price(preview: dict) -> dict:
    return preview.get("priceMetrics") or {}


def _technicals(preview: dict) -> dict:
    return (preview.get("technicalIndicators") or {}).get("data") or {}


def _changes(preview: dict, *names: str) -> list[float]:
    price = _price(preview)
    return [price[n] for n in names if price.get(n) is not None]


# =============================================================================
# SUB-SCORES
# =============================================================================


def volatility_score(preview: dict) -> float:
    """
    Scalping wants moderate short-term movement.
    Peaks around 1% average absolute moves over the last hour.
    """
    moves = [abs(c) for c in _changes(
        preview, "priceChange5min", "priceChange15min", "priceChange30min", "priceChange1hr"
    )]
    current = _price(preview).get("currentPrice")
    atr = _technicals(preview).get("ATR")
    if not moves and not (atr and current):
        return NEUTRAL

    score = 0.0
    if moves:
        avg_move = sum(moves) / len(moves)
        if avg_move < 0.1:
            score += avg_move * 300
        elif avg_move < 1.0:
            score += 30 + (avg_move - 0.1) * 30
        elif avg_move < 3.0:
            score += 60 - (avg_move - 1.0) * 15
        else:
            score += max(0.0, 30 - (avg_move - 3.0) * 5)

    if atr and current:
        atr_percent = atr / current * 100
        if atr_percent < 0.1:
            score += atr_percent * 200
        elif atr_percent < 1.0:
            score += 20 + (atr_percent - 0.1) * 15
        elif atr_percent < 3.0:
            score += 35 + (atr_percent - 1.0) * 2.5
        else:
            score += max(0.0, 40 - (atr_percent - 3.0) * 8)

    return _clamp(score)


def volume_score(preview: dict) -> float:
    """Relative and absolute liquidity."""
    volume = preview.get("volumeMetrics") or {}
    recent = volume.get("recentVolume30min")
    average = volume.get("averageVolume10days")
    session = volume.get("regularMarketVolume")
    if not average:
        return NEUTRAL

    score = 0.0

    # Last 30 minutes against an average half-hour of the day
    if recent is not None:
        relative = recent / (average / 48)
        if relative < 0.5:
            score += relative * 40
        elif relative < 2.0:
            score += 20 + (relative - 0.5) * 20
        elif relative < 5.0:
            score += 50 - (relative - 2.0) * 5
        else:
            score += max(0.0, 35 - (relative - 5.0) * 3)

    if average >= 10_000_000:
        score += 30
    elif average >= 1_000_000:
        score += 25
    elif average >= 100_000:
        score += 15
    else:
        score += average / 100_000 * 15

    if session is not None:
        score += min(20.0, session / average * 20)

    return _clamp(score)


def technical_score(preview: dict, mode: TradeMode) -> float:
    """RSI, MACD, Bollinger %B and EMA alignment."""
    tech = _technicals(preview)
    if not tech:
        return NEUTRAL

    score = 0.0

    rsi = tech.get("RSI")
    if rsi is not None:
        if 50 <= rsi <= 70:
            score += 25
        elif 30 <= rsi < 50:
            score += 18
        elif 70 < rsi <= 80 or 20 <= rsi < 30:
            score += 10
        else:
            score += 5
    else:
        score += 12.5

    histogram = (tech.get("MACD") or {}).get("histogram")
    if histogram is not None:
        if histogram > 0:
            score += 25
        elif histogram > -abs(tech.get("ATR") or 0) * 0.1:
            score += 12
    else:
        score += 12.5

    percent_b = tech.get("BB_PB")
    if percent_b is not None:
        if mode == TradeMode.SCALP:
            # Room to move in both directions
            score += 25 if 0.2 <= percent_b <= 0.8 else 12
        else:
            # Swing entries near the lower half of the bands
            score += 25 if 0.1 <= percent_b <= 0.6 else 10
    else:
        score += 12.5

    emas = [tech.get("EMA9"), tech.get("EMA20"), tech.get("EMA50")]
    if all(e is not None for e in emas):
        if emas[0] > emas[1] > emas[2]:
            score += 25
        elif emas[0] > emas[1]:
            score += 15
        else:
            score += 5
    else:
        score += 12.5

    return _clamp(score)


def momentum_score(preview: dict, mode: TradeMode) -> float:
    """Direction and consistency of recent price changes."""
    if mode == TradeMode.SCALP:
        changes = _changes(preview, "priceChange15min", "priceChange1hr", "priceChange3hr")
    else:
        changes = _changes(preview, "priceChange1day", "priceChange3days", "priceChange7days")
    if not changes:
        return NEUTRAL

    positive = sum(1 for c in changes if c > 0)
    consistency = positive / len(changes)
    average = sum(changes) / len(changes)

    scale = 2.0 if mode == TradeMode.SCALP else 8.0
    strength = _clamp(50 + average / scale * 50)
    return _clamp(consistency * 50 + strength * 0.5)


def trend_score(preview: dict) -> float:
    """Price relative to the 50-period averages and moderate beta."""
    current = _price(preview).get("currentPrice")
    sma50 = _technicals(preview).get("SMA50")
    beta = (preview.get("fundamentals") or {}).get("beta")
    if not current:
        return NEUTRAL

    score = NEUTRAL
    if sma50:
        score += 25 if current > sma50 else -25
    if beta is not None:
        score += 15 if 0.8 <= beta <= 1.8 else -10
    return _clamp(score)


# =============================================================================
# COMPOSITES
# =============================================================================


def calculate_scalp_score(preview: dict[str, Any]) -> float:
    """Composite scalp suitability (0-100)."""
    parts = {
        "volatility": volatility_score(preview),
        "volume": volume_score(preview),
        "technical": technical_score(preview, TradeMode.SCALP),
        "momentum": momentum_score(preview, TradeMode.SCALP),
    }
    return sum(parts[name] * weight for name, weight in SCALP_WEIGHTS.items())


def calculate_swing_score(preview: dict[str, Any]) -> float:
    """Composite swing suitability (0-100)."""
    parts = {
        "momentum": momentum_score(preview, TradeMode.SWING),
        "technical": technical_score(preview, TradeMode.SWING),
        "volume": volume_score(preview),
        "trend": trend_score(preview),
    }
    return sum(parts[name] * weight for name, weight in SWING_WEIGHTS.items())


def calculate_score(preview: dict[str, Any], mode: TradeMode) -> float:
    """Score a preview for the given trade mode."""
    if TradeMode(mode) == TradeMode.SCALP:
        return calculate_scalp_score(preview)
    return calculate_swing_score(preview)
