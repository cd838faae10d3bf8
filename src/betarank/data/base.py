"""Price series provider contract."""

from __future__ import annotations

from typing import Protocol

import numpy as np
import pandas as pd

from betarank.domain.models import FetchWindow
from betarank.errors import InsufficientDataError

DEFAULT_MIN_CANDLES = 20


class PriceSeriesProvider(Protocol):
    """Interface for daily close retrieval."""

    def fetch_closes(self, base: str, quote: str, window: FetchWindow) -> pd.Series:
        """Return positive finite daily closes, oldest first, with a datetime index."""


def finalize_closes(
    closes: pd.Series,
    symbol: str,
    window: FetchWindow,
    min_candles: int = DEFAULT_MIN_CANDLES,
) -> pd.Series:
    """Clean provider closes and enforce the minimum candle count."""
    series = pd.to_numeric(pd.Series(closes), errors="coerce").astype(float)
    series = series[np.isfinite(series) & (series > 0)]
    series = series[~series.index.duplicated(keep="last")].sort_index()
    if window.candles is not None:
        series = series.iloc[-window.candles :]
    if len(series) < min_candles:
        raise InsufficientDataError(
            f"{symbol}: {len(series)} daily closes available, need at least {min_candles}"
        )
    series.name = "close"
    return series
