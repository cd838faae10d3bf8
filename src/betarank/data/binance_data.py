"""Binance spot market data provider."""

from __future__ import annotations

from datetime import UTC, datetime, time, timedelta
from typing import Any

import pandas as pd

from betarank.data.base import DEFAULT_MIN_CANDLES, finalize_closes
from betarank.data.http_client import JsonHttpClient
from betarank.domain.models import FetchWindow
from betarank.errors import ProviderResponseError

# Kline array layout: [open_time, open, high, low, close, volume, close_time, ...]
_OPEN_TIME = 0
_CLOSE = 4
MAX_KLINES = 1000


class BinanceDataProvider:
    """Fetch daily closes from the public Binance klines endpoint."""

    def __init__(
        self,
        base_url: str = "https://api.binance.com",
        timeout: float = 20.0,
        max_retries: int = 3,
        min_candles: int = DEFAULT_MIN_CANDLES,
        client: JsonHttpClient | None = None,
    ) -> None:
        self.client = client or JsonHttpClient(
            base_url=base_url,
            provider_name="Binance",
            timeout=timeout,
            max_retries=max_retries,
        )
        self.min_candles = min_candles

    def fetch_closes(self, base: str, quote: str, window: FetchWindow) -> pd.Series:
        pair = self.pair_symbol(base, quote)
        params: dict[str, str] = {"symbol": pair, "interval": "1d"}
        if window.candles is not None:
            params["limit"] = str(min(window.candles, MAX_KLINES))
        else:
            assert window.start is not None and window.end is not None
            start = datetime.combine(window.start, time.min, tzinfo=UTC)
            end = datetime.combine(window.end + timedelta(days=1), time.min, tzinfo=UTC)
            params["startTime"] = str(int(start.timestamp() * 1000))
            params["endTime"] = str(int(end.timestamp() * 1000) - 1)
            params["limit"] = str(MAX_KLINES)
        payload = self.client.get_json("/api/v3/klines", params=params)
        closes = self._klines_to_closes(pair, payload)
        return finalize_closes(closes, pair, window, self.min_candles)

    @staticmethod
    def pair_symbol(base: str, quote: str) -> str:
        return f"{base.strip().upper()}{quote.strip().upper()}"

    @staticmethod
    def _klines_to_closes(pair: str, payload: Any) -> pd.Series:
        if isinstance(payload, dict):
            message = payload.get("msg") or "unexpected object payload"
            raise ProviderResponseError(f"Binance error for {pair}: {message}")
        if not isinstance(payload, list):
            raise ProviderResponseError(f"Binance returned a malformed klines payload for {pair}")
        times: list[int] = []
        closes: list[Any] = []
        for kline in payload:
            if not isinstance(kline, list) or len(kline) <= _CLOSE:
                raise ProviderResponseError(f"Binance kline row malformed for {pair}")
            times.append(int(kline[_OPEN_TIME]))
            closes.append(kline[_CLOSE])
        index = pd.to_datetime(times, unit="ms", utc=True)
        return pd.Series(closes, index=index, name="close")
