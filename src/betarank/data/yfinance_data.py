"""Yahoo Finance market data provider."""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Any

import pandas as pd

from betarank.data.base import DEFAULT_MIN_CANDLES, finalize_closes
from betarank.domain.models import FetchWindow
from betarank.errors import DataProviderError, ProviderResponseError

# Equity sessions skip weekends and holidays; request extra calendar days.
EQUITY_CALENDAR_FACTOR = 1.5


class YFinanceDataProvider:
    """Fetch daily closes from Yahoo Finance via yfinance."""

    def __init__(
        self,
        asset_class: str = "crypto",
        min_candles: int = DEFAULT_MIN_CANDLES,
    ) -> None:
        normalized = asset_class.strip().lower()
        if normalized not in {"crypto", "equity"}:
            raise ValueError("asset_class must be one of crypto, equity")
        self.asset_class = normalized
        self.min_candles = min_candles

    def fetch_closes(self, base: str, quote: str, window: FetchWindow) -> pd.Series:
        try:
            import yfinance as yf
        except ImportError as exc:
            raise DataProviderError(
                "yfinance is required for PRICE_SOURCE=yfinance. Install it with `pip install yfinance`."
            ) from exc

        ticker = self.resolve_yfinance_symbol(base, quote, self.asset_class)
        try:
            history = yf.Ticker(ticker).history(
                interval="1d",
                auto_adjust=False,
                actions=False,
                **self._history_range(window),
            )
        except Exception as exc:
            raise DataProviderError(f"yfinance request failed for {base} ({ticker}): {exc}") from exc

        closes = self._close_column(history, base, ticker)
        return finalize_closes(closes, ticker, window, self.min_candles)

    def _history_range(self, window: FetchWindow) -> dict[str, Any]:
        if window.candles is not None:
            days = window.candles
            if self.asset_class == "equity":
                days = int(days * EQUITY_CALENDAR_FACTOR) + 5
            return {"period": f"{days}d"}
        assert window.start is not None and window.end is not None
        return {
            "start": window.start.isoformat(),
            "end": (window.end + timedelta(days=1)).isoformat(),
        }

    @staticmethod
    def _close_column(history: Any, base: str, ticker: str) -> pd.Series:
        if history is None:
            raise ProviderResponseError(f"yfinance returned no rows for {base} ({ticker})")
        frame = pd.DataFrame(history)
        if frame.empty:
            raise ProviderResponseError(f"yfinance returned no rows for {base} ({ticker})")
        close_column = YFinanceDataProvider._pick_column(frame, "close")
        if close_column is None:
            close_column = YFinanceDataProvider._pick_column(frame, "adj_close")
        if close_column is None:
            raise ProviderResponseError(f"yfinance payload missing close column for {base} ({ticker})")
        closes = pd.to_numeric(frame[close_column], errors="coerce")
        closes.index = pd.to_datetime(frame.index, utc=True)
        return closes

    @staticmethod
    def _pick_column(frame: pd.DataFrame, field: str) -> Any | None:
        for column in frame.columns:
            key = YFinanceDataProvider._column_key(column)
            if key == field or key.startswith(f"{field}_"):
                return column
        return None

    @staticmethod
    def _column_key(value: Any) -> str:
        if isinstance(value, tuple):
            text = "_".join(str(part) for part in value if part is not None)
        else:
            text = str(value)
        return re.sub(r"[^a-zA-Z0-9]+", "_", text).strip("_").lower()

    @staticmethod
    def resolve_yfinance_symbol(base: str, quote: str, asset_class: str = "crypto") -> str:
        symbol = base.strip().upper()
        if asset_class != "crypto":
            return symbol
        normalized_quote = quote.strip().upper()
        if normalized_quote in {"USDT", "USDC", "BUSD", "TUSD", "FDUSD"}:
            normalized_quote = "USD"
        return f"{symbol}-{normalized_quote}"
