"""
Tests for the ticker universe and Yahoo symbol mapping.
"""

import pytest

from ranker.services.tickers import SYMBOLS, get_all_tickers, get_asset_class, map_symbol


@pytest.mark.parametrize(
    "ticker,expected",
    [
        ("EURUSD", "EURUSD=X"),
        ("BTCUSD", "BTC-USD"),
        ("IBIT.ETF", "IBIT"),
        ("AAPL.NAS", "AAPL"),
        ("ABBV.NYSE", "ABBV"),
        ("TM.TSE", "7203.T"),
        ("UNKNOWN", "UNKNOWN"),
    ],
)
def test_map_symbol(ticker, expected):
    assert map_symbol(ticker) == expected


def test_asset_class_lookup():
    assert get_asset_class("EURUSD") == "forex"
    assert get_asset_class("AAPL.NAS") == "us_stocks"
    assert get_asset_class("NOPE") is None


def test_universe_contains_every_class_once():
    tickers = get_all_tickers()
    assert len(tickers) == sum(len(v) for v in SYMBOLS.values())
    assert len(set(tickers)) == len(tickers)
    assert tickers[0] == SYMBOLS["forex"][0]


def test_every_japanese_ticker_has_a_code():
    for ticker in SYMBOLS["japan_stocks"]:
        assert map_symbol(ticker).endswith(".T")
