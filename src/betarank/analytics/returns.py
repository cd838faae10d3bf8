"""Log-return conversion for daily close series."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd

from betarank.errors import InsufficientDataError


def log_returns(prices: Sequence[float] | np.ndarray | pd.Series) -> np.ndarray:
    """Return ``ln(price[i + 1] / price[i])`` for consecutive closes.

    The result is a read-only array one element shorter than ``prices``.
    """
    values = np.asarray(prices, dtype=float)
    if values.ndim != 1:
        raise ValueError("prices must be a one-dimensional sequence")
    if values.size < 2:
        raise InsufficientDataError(
            f"log returns need at least 2 prices, got {values.size}"
        )
    returns = np.log(values[1:] / values[:-1])
    returns.setflags(write=False)
    return returns


def trailing(returns: np.ndarray, count: int) -> np.ndarray:
    """Return the last ``count`` elements (all of them when shorter)."""
    if count <= 0:
        raise ValueError("count must be positive")
    return returns[-count:]


def _by_day(closes: pd.Series) -> pd.Series:
    index = pd.DatetimeIndex(closes.index)
    if index.tz is not None:
        index = index.tz_convert("UTC").tz_localize(None)
    daily = pd.Series(np.asarray(closes, dtype=float), index=index.normalize())
    return daily[~daily.index.duplicated(keep="last")]


def aligned_log_returns(asset: pd.Series, bench: pd.Series) -> pd.DataFrame:
    """Return ``asset``/``bench`` log returns over the calendar days both series cover.

    Closes are joined on their (UTC) day before differencing, so a missing day
    in either series widens the return interval for both columns alike.
    """
    closes = (
        pd.concat([_by_day(asset), _by_day(bench)], axis=1, join="inner", keys=["asset", "bench"])
        .dropna()
        .sort_index()
    )
    return np.log(closes / closes.shift(1)).iloc[1:]
