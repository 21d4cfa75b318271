"""
Ticker Preview Data

Fetches market data from Yahoo Finance and condenses it into the preview
dict that comparators score or show to the LLM:

{
    "symbol": "AAPL",
    "priceMetrics": {...},          # current price + % changes
    "volumeMetrics": {...},         # recent / average / session volume
    "technicalIndicators": {...},   # latest 15m indicator values
    "fundamentals": {...},          # market state, beta, market cap
}

Previews are JSON-serializable so they can be cached in Redis.
"""

import asyncio
import logging
from typing import Any, Optional

import numpy as np
import yfinance as yf

from ranker.services.base import ExternalAPIError
from ranker.services.indicators.calculations import indicator_snapshot
from ranker.services.tickers.universe import map_symbol

logger = logging.getLogger(__name__)

SERVICE_NAME = "PreviewService"

# (period, interval) per bar series
INTRADAY_15M = ("5d", "15m")
INTRADAY_5M = ("2d", "5m")
DAILY = ("3mo", "1d")

# Lags in bars for the price-change metrics
PRICE_CHANGE_LAGS = {
    "priceChange5min": ("5m", 1),
    "priceChange15min": ("15m", 1),
    "priceChange30min": ("15m", 2),
    "priceChange1hr": ("15m", 4),
    "priceChange3hr": ("15m", 12),
    "priceChange7hr": ("15m", 28),
    "priceChange1day": ("1d", 1),
    "priceChange3days": ("1d", 3),
    "priceChange7days": ("1d", 7),
    "priceChange30days": ("1d", 30),
}


def compute_change_percent(closes: np.ndarray, lag: int) -> Optional[float]:
    """Percent change between the latest close and the close `lag` bars earlier."""
    if len(closes) <= lag:
        return None
    previous = closes[-lag - 1]
    if previous == 0:
        return 0.0
    return round(float((closes[-1] - previous) / previous * 100), 2)


def _is_forex(yahoo_symbol: str) -> bool:
    return yahoo_symbol.upper().endswith("=X")


def _history(ticker: yf.Ticker, period: str, interval: str):
    return ticker.history(period=period, interval=interval, prepost=True)


def _download(yahoo_symbol: str) -> dict[str, Any]:
    """Blocking Yahoo Finance calls; run in an executor."""
    ticker = yf.Ticker(yahoo_symbol)
    return {
        "15m": _history(ticker, *INTRADAY_15M),
        "5m": _history(ticker, *INTRADAY_5M),
        "1d": _history(ticker, *DAILY),
        "info": ticker.info or {},
    }


def build_preview(yahoo_symbol: str, data: dict[str, Any]) -> dict[str, Any]:
    """Assemble a preview from downloaded bar series and quote info."""
    bars_15m = data["15m"]
    if bars_15m.empty:
        raise ExternalAPIError(SERVICE_NAME, f"No 15m bars returned for {yahoo_symbol}")

    # Forex quotes carry no volume, keep every bar for them
    if not _is_forex(yahoo_symbol):
        bars_15m = bars_15m[bars_15m["Volume"] > 0]
        if bars_15m.empty:
            raise ExternalAPIError(SERVICE_NAME, f"No traded 15m bars for {yahoo_symbol}")

    info = data["info"]
    closes = {
        "5m": data["5m"]["Close"].to_numpy(dtype=float) if not data["5m"].empty else np.array([]),
        "15m": bars_15m["Close"].to_numpy(dtype=float),
        "1d": data["1d"]["Close"].to_numpy(dtype=float) if not data["1d"].empty else np.array([]),
    }

    current_price = float(closes["15m"][-1])
    if len(closes["5m"]):
        current_price = float(closes["5m"][-1])

    price_metrics: dict[str, Any] = {"currentPrice": round(current_price, 6)}
    for name, (series, lag) in PRICE_CHANGE_LAGS.items():
        price_metrics[name] = compute_change_percent(closes[series], lag)

    volumes = bars_15m["Volume"].to_numpy(dtype=float)
    volume_metrics = {}
    if not _is_forex(yahoo_symbol):
        volume_metrics = {
            "recentVolume30min": float(volumes[-2:].sum()),
            "averageVolume10days": info.get("averageVolume10days"),
            "regularMarketVolume": info.get("regularMarketVolume"),
        }

    indicators = indicator_snapshot(
        bars_15m["High"].to_numpy(dtype=float),
        bars_15m["Low"].to_numpy(dtype=float),
        closes["15m"],
    )

    return {
        "symbol": yahoo_symbol,
        "priceMetrics": price_metrics,
        "volumeMetrics": volume_metrics,
        "technicalIndicators": {
            "timeFrame": "15min (latest)",
            "data": indicators,
        },
        "fundamentals": {
            "marketStatus": {"state": (info.get("marketState") or "").lower() or None},
            "beta": info.get("beta"),
            "marketCap": info.get("marketCap"),
            "fiftyDayAverage": info.get("fiftyDayAverage"),
            "twoHundredDayAverage": info.get("twoHundredDayAverage"),
        },
    }


async def fetch_ticker_preview(ticker: str) -> dict[str, Any]:
    """
    Fetch and summarize market data for a broker ticker.

    Raises:
        ExternalAPIError: naming the Yahoo symbol, when data is unavailable
    """
    yahoo_symbol = map_symbol(ticker)
    logger.info(f"Fetching preview for {ticker} ({yahoo_symbol})")

    loop = asyncio.get_running_loop()
    try:
        data = await loop.run_in_executor(None, _download, yahoo_symbol)
    except Exception as e:
        raise ExternalAPIError(
            SERVICE_NAME, f"Failed to fetch data for {yahoo_symbol}: {e}"
        ) from e

    return build_preview(yahoo_symbol, data)


async def fetch_market_state(ticker: str) -> Optional[str]:
    """
    Get the live market state for a ticker.
    Yahoo states: "prepre", "pre", "regular", "post", "postpost", "closed".
    """
    yahoo_symbol = map_symbol(ticker)
    loop = asyncio.get_running_loop()
    info = await loop.run_in_executor(None, lambda: yf.Ticker(yahoo_symbol).info)
    state = (info or {}).get("marketState")
    return state.lower() if state else None
