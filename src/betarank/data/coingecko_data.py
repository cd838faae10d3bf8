"""CoinGecko market data provider."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, time, timedelta
from typing import Any

import pandas as pd

from betarank.data.base import DEFAULT_MIN_CANDLES, finalize_closes
from betarank.data.http_client import JsonHttpClient
from betarank.data.symbol_cache import SymbolCache
from betarank.domain.models import FetchWindow
from betarank.errors import ProviderResponseError

logger = logging.getLogger(__name__)

STABLE_QUOTES = {"USDT", "USDC", "BUSD", "TUSD", "FDUSD", "USD"}


class CoinGeckoDataProvider:
    """Fetch daily closes from CoinGecko, resolving symbols to coin ids."""

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        api_key: str = "",
        timeout: float = 20.0,
        max_retries: int = 3,
        min_candles: int = DEFAULT_MIN_CANDLES,
        symbol_cache: SymbolCache | None = None,
        client: JsonHttpClient | None = None,
    ) -> None:
        headers = {"x-cg-demo-api-key": api_key} if api_key else None
        self.client = client or JsonHttpClient(
            base_url=base_url,
            provider_name="CoinGecko",
            timeout=timeout,
            max_retries=max_retries,
            headers=headers,
        )
        self.min_candles = min_candles
        self.symbol_cache = symbol_cache if symbol_cache is not None else SymbolCache()

    def fetch_closes(self, base: str, quote: str, window: FetchWindow) -> pd.Series:
        coin_id = self.symbol_cache.get_or_resolve(base, self.resolve_coin_id)
        vs_currency = self.vs_currency(quote)
        if window.candles is not None:
            payload = self.client.get_json(
                f"/coins/{coin_id}/market_chart",
                params={
                    "vs_currency": vs_currency,
                    "days": str(window.candles),
                    "interval": "daily",
                },
            )
        else:
            assert window.start is not None and window.end is not None
            start = datetime.combine(window.start, time.min, tzinfo=UTC)
            end = datetime.combine(window.end + timedelta(days=1), time.min, tzinfo=UTC)
            payload = self.client.get_json(
                f"/coins/{coin_id}/market_chart/range",
                params={
                    "vs_currency": vs_currency,
                    "from": str(int(start.timestamp())),
                    "to": str(int(end.timestamp())),
                },
            )
        closes = self._prices_to_daily_closes(coin_id, payload)
        return finalize_closes(closes, f"{base}/{vs_currency}", window, self.min_candles)

    def resolve_coin_id(self, base: str) -> str:
        """Return the best-ranked CoinGecko coin id whose symbol equals ``base``."""
        payload = self.client.get_json("/search", params={"query": base})
        coins = payload.get("coins") if isinstance(payload, dict) else None
        if not isinstance(coins, list):
            raise ProviderResponseError(f"CoinGecko search payload malformed for {base}")
        target = base.strip().upper()
        matches = [
            coin
            for coin in coins
            if isinstance(coin, dict) and str(coin.get("symbol", "")).upper() == target
        ]
        if not matches:
            raise ProviderResponseError(f"CoinGecko has no coin with symbol {target}")
        best = min(matches, key=self._market_cap_rank)
        coin_id = str(best.get("id", "")).strip()
        if not coin_id:
            raise ProviderResponseError(f"CoinGecko search result for {target} has no id")
        logger.debug("resolved %s to CoinGecko id %s", target, coin_id)
        return coin_id

    @staticmethod
    def vs_currency(quote: str) -> str:
        normalized = quote.strip().upper()
        if normalized in STABLE_QUOTES:
            return "usd"
        return normalized.lower()

    @staticmethod
    def _market_cap_rank(coin: dict[str, Any]) -> int:
        rank = coin.get("market_cap_rank")
        return rank if isinstance(rank, int) else 10**9

    @staticmethod
    def _prices_to_daily_closes(coin_id: str, payload: Any) -> pd.Series:
        if not isinstance(payload, dict):
            raise ProviderResponseError(f"CoinGecko chart payload malformed for {coin_id}")
        if "error" in payload:
            raise ProviderResponseError(f"CoinGecko error for {coin_id}: {payload['error']}")
        prices = payload.get("prices")
        if not isinstance(prices, list):
            raise ProviderResponseError(f"CoinGecko chart has no prices for {coin_id}")
        frame = pd.DataFrame(
            [point[:2] for point in prices if isinstance(point, list) and len(point) >= 2],
            columns=["time", "close"],
        )
        if frame.empty:
            return pd.Series(dtype=float, name="close")
        frame.index = pd.to_datetime(frame["time"], unit="ms", utc=True)
        # Range queries return intraday points; keep the last observation per day.
        daily = frame["close"].groupby(frame.index.normalize()).last()
        daily.name = "close"
        return daily
