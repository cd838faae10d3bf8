"""Alpaca market data provider."""

from __future__ import annotations

from datetime import UTC, datetime, time, timedelta
from typing import Any

import pandas as pd

from betarank.data.base import DEFAULT_MIN_CANDLES, finalize_closes
from betarank.data.http_client import JsonHttpClient
from betarank.domain.models import FetchWindow
from betarank.errors import ProviderResponseError

CRYPTO_QUOTES = {"USD", "USDT", "USDC", "BTC"}
EQUITY_CALENDAR_FACTOR = 1.5


class AlpacaMarketDataProvider:
    """Fetch daily closes from Alpaca's data API."""

    def __init__(
        self,
        api_key: str,
        secret_key: str,
        data_base_url: str = "https://data.alpaca.markets",
        asset_class: str = "crypto",
        timeout: float = 20.0,
        max_retries: int = 3,
        min_candles: int = DEFAULT_MIN_CANDLES,
        client: JsonHttpClient | None = None,
    ) -> None:
        self.client = client or JsonHttpClient(
            base_url=data_base_url,
            provider_name="Alpaca data",
            timeout=timeout,
            max_retries=max_retries,
            headers={
                "APCA-API-KEY-ID": api_key,
                "APCA-API-SECRET-KEY": secret_key,
            },
        )
        self.asset_class = asset_class.strip().lower()
        self.min_candles = min_candles

    def fetch_closes(self, base: str, quote: str, window: FetchWindow) -> pd.Series:
        start_time, end_time = self._time_range(window)
        if self.asset_class == "crypto" and quote.strip().upper() in CRYPTO_QUOTES:
            symbol = self.to_alpaca_crypto_symbol(base, quote)
            bars = self._fetch_crypto_bars(symbol, start_time, end_time)
        else:
            symbol = base.strip().upper()
            bars = self._fetch_stock_bars(symbol, start_time, end_time)
        closes = self._bars_to_closes(symbol, bars)
        return finalize_closes(closes, symbol, window, self.min_candles)

    def _time_range(self, window: FetchWindow) -> tuple[datetime, datetime]:
        if window.candles is not None:
            end_time = datetime.now(tz=UTC)
            days = window.candles
            if self.asset_class != "crypto":
                days = int(days * EQUITY_CALENDAR_FACTOR) + 5
            return end_time - timedelta(days=days), end_time
        assert window.start is not None and window.end is not None
        start_time = datetime.combine(window.start, time.min, tzinfo=UTC)
        end_time = datetime.combine(window.end + timedelta(days=1), time.min, tzinfo=UTC)
        return start_time, end_time

    def _fetch_stock_bars(
        self,
        symbol: str,
        start_time: datetime,
        end_time: datetime,
    ) -> list[dict]:
        payload = self.client.get_json(
            f"/v2/stocks/{symbol}/bars",
            params={
                "timeframe": "1Day",
                "start": start_time.isoformat(),
                "end": end_time.isoformat(),
                "limit": "10000",
                "adjustment": "raw",
                "feed": "iex",
                "sort": "asc",
            },
        )
        bars = payload.get("bars", []) if isinstance(payload, dict) else None
        if bars is None:
            return []
        if not isinstance(bars, list):
            raise ProviderResponseError(f"Alpaca bars payload malformed for {symbol}")
        return bars

    def _fetch_crypto_bars(
        self,
        symbol: str,
        start_time: datetime,
        end_time: datetime,
    ) -> list[dict]:
        payload = self.client.get_json(
            "/v1beta3/crypto/us/bars",
            params={
                "symbols": symbol,
                "timeframe": "1Day",
                "start": start_time.isoformat(),
                "end": end_time.isoformat(),
                "limit": "10000",
                "sort": "asc",
            },
        )
        raw = payload.get("bars", {}) if isinstance(payload, dict) else {}
        if isinstance(raw, list):
            return raw
        if isinstance(raw, dict):
            bars = raw.get(symbol)
            if bars is None:
                bars = raw.get(symbol.replace("/", ""))
            if bars is None and len(raw) == 1:
                bars = next(iter(raw.values()))
            return bars if isinstance(bars, list) else []
        raise ProviderResponseError(f"Alpaca bars payload malformed for {symbol}")

    @staticmethod
    def _bars_to_closes(symbol: str, bars: list[dict[str, Any]]) -> pd.Series:
        if not bars:
            return pd.Series(dtype=float, name="close")
        frame = pd.DataFrame(bars)
        if not {"c", "t"}.issubset(frame.columns):
            raise ProviderResponseError(f"{symbol}: bar payload missing close/time fields")
        closes = pd.to_numeric(frame["c"], errors="coerce")
        closes.index = pd.to_datetime(frame["t"], utc=True)
        return closes

    @staticmethod
    def to_alpaca_crypto_symbol(base: str, quote: str) -> str:
        normalized_quote = quote.strip().upper()
        if normalized_quote in {"USDT", "USDC"}:
            normalized_quote = "USD"
        return f"{base.strip().upper()}/{normalized_quote}"
