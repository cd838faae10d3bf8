"""CSV-backed price data provider."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from betarank.data.base import DEFAULT_MIN_CANDLES, finalize_closes
from betarank.domain.models import FetchWindow
from betarank.errors import DataProviderError, ProviderResponseError


class CsvDataProvider:
    """Load daily closes from local CSV files."""

    date_column_candidates = ("date", "datetime", "timestamp")
    close_column_candidates = ("close", "adj_close", "adj close", "price")

    def __init__(self, data_dir: str, min_candles: int = DEFAULT_MIN_CANDLES) -> None:
        self.data_dir = Path(data_dir)
        self.min_candles = min_candles

    def fetch_closes(self, base: str, quote: str, window: FetchWindow) -> pd.Series:
        path = self._resolve_path(base, quote)
        if path is None:
            raise DataProviderError(f"No CSV found for {base}{quote} or {base} under {self.data_dir}")
        closes = self._read_closes(path, base)
        if window.is_range:
            assert window.start is not None and window.end is not None
            dates = closes.index.date
            closes = closes[(dates >= window.start) & (dates <= window.end)]
        return finalize_closes(closes, base, window, self.min_candles)

    def _resolve_path(self, base: str, quote: str) -> Path | None:
        pair = f"{base}{quote}".strip()
        candidates: list[Path] = []
        for name in (pair, base.strip()):
            candidates.extend(
                [
                    self.data_dir / f"{name.upper()}.csv",
                    self.data_dir / f"{name.lower()}.csv",
                ]
            )
        for candidate in candidates:
            if candidate.exists():
                return candidate
        return None

    def _read_closes(self, path: Path, symbol: str) -> pd.Series:
        frame = pd.read_csv(path)
        lower_to_original = {str(column).strip().lower(): column for column in frame.columns}
        date_column = self._pick(lower_to_original, self.date_column_candidates, "date", symbol)
        close_column = self._pick(lower_to_original, self.close_column_candidates, "close", symbol)
        closes = pd.to_numeric(frame[close_column], errors="coerce")
        closes.index = pd.to_datetime(frame[date_column], utc=True)
        return closes.sort_index()

    @staticmethod
    def _pick(
        lower_to_original: dict[str, str],
        candidates: tuple[str, ...],
        label: str,
        symbol: str,
    ) -> str:
        for candidate in candidates:
            if candidate in lower_to_original:
                return lower_to_original[candidate]
        expected = ", ".join(candidates)
        raise ProviderResponseError(f"{symbol}: CSV missing {label} column. Expected one of: {expected}")
