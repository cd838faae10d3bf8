"""Ticker string normalization."""

from __future__ import annotations

import re

EXCHANGE_DELIMITER = ":"

# Tried in order; the first suffix that leaves a non-empty base wins. Longer
# stablecoin tickers come before "USD" so "ETHUSDT" never becomes "ETHUSD"+"T".
QUOTE_SUFFIXES: tuple[str, ...] = (
    "FDUSD",
    "USDT",
    "USDC",
    "BUSD",
    "TUSD",
    "USD",
    "EUR",
    "BTC",
    "ETH",
    "BNB",
)

_VALID_SYMBOL = re.compile(r"^[A-Z0-9]+$")


def normalize_ticker(raw: object) -> str:
    """Return the raw ticker trimmed and upper-cased, or ``""`` for non-strings."""
    if not isinstance(raw, str):
        return ""
    return raw.strip().upper()


def split_market_symbol(symbol: str) -> tuple[str | None, str]:
    """Split ``EXCHANGE:SYMBOL`` into its parts, keeping only the last segment."""
    value = symbol.strip()
    if EXCHANGE_DELIMITER not in value:
        return None, value
    parts = value.split(EXCHANGE_DELIMITER)
    market = parts[0].strip().upper()
    bare_symbol = parts[-1].strip()
    if not market or not bare_symbol:
        return None, bare_symbol
    return market, bare_symbol


def strip_quote_suffix(symbol: str, suffixes: tuple[str, ...] = QUOTE_SUFFIXES) -> str:
    """Remove the first matching quote-currency suffix from a compact pair."""
    for quote in suffixes:
        if symbol.endswith(quote) and len(symbol) > len(quote):
            return symbol[: -len(quote)]
    return symbol


def to_base_symbol(raw: object, suffixes: tuple[str, ...] = QUOTE_SUFFIXES) -> str:
    """Map a raw ticker to its base asset symbol.

    ``"BINANCE:SOLUSDT"`` and ``"sol/usdt"`` both map to ``"SOL"``. Input that
    does not reduce to an alphanumeric symbol maps to ``""``.
    """
    ticker = normalize_ticker(raw)
    if not ticker:
        return ""
    _market, bare_symbol = split_market_symbol(ticker)
    compact = bare_symbol.replace("/", "").replace("-", "").replace("_", "")
    if not compact or not _VALID_SYMBOL.match(compact):
        return ""
    return strip_quote_suffix(compact, suffixes)
