"""Tests for ticker to base symbol normalization."""

from __future__ import annotations

import pytest

from betarank.symbols import (
    normalize_ticker,
    split_market_symbol,
    strip_quote_suffix,
    to_base_symbol,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("BINANCE:SOLUSDT", "SOL"),
        ("ETHUSDT", "ETH"),
        ("btcusdt", "BTC"),
        ("  BYBIT:XRPUSDC ", "XRP"),
        ("COINBASE:BTCUSD", "BTC"),
        ("sol/usdt", "SOL"),
        ("ETH-USD", "ETH"),
        ("ETHBTC", "ETH"),
        ("DOGEFDUSD", "DOGE"),
        ("SPY", "SPY"),
        ("USDT", "USDT"),
    ],
)
def test_to_base_symbol(raw: str, expected: str) -> None:
    assert to_base_symbol(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "BINANCE:", "$$$", None, 42])
def test_unparseable_input_maps_to_empty(raw: object) -> None:
    assert to_base_symbol(raw) == ""


def test_usdt_is_tried_before_usd() -> None:
    assert strip_quote_suffix("ETHUSDT") == "ETH"
    assert strip_quote_suffix("ETHUSD") == "ETH"


def test_custom_suffix_priority() -> None:
    assert strip_quote_suffix("ETHUSDT", suffixes=("USD",)) == "ETHUSDT"
    assert strip_quote_suffix("ETHUSDT", suffixes=("T", "USDT")) == "ETHUSD"


def test_split_market_symbol_takes_last_segment() -> None:
    assert split_market_symbol("BINANCE:SOLUSDT") == ("BINANCE", "SOLUSDT")
    assert split_market_symbol("A:B:ETHUSDT") == ("A", "ETHUSDT")
    assert split_market_symbol("SOLUSDT") == (None, "SOLUSDT")


def test_normalize_ticker_uppercases_strings_only() -> None:
    assert normalize_ticker(" binance:solusdt ") == "BINANCE:SOLUSDT"
    assert normalize_ticker(7) == ""
