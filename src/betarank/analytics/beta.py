"""Beta of an asset's returns against a benchmark's returns."""

from __future__ import annotations

import math

import numpy as np

from betarank.analytics.stats import Numeric, covariance, variance

# Regressions on fewer aligned samples are not meaningful enough to rank on.
MIN_BETA_SAMPLES = 10


def estimate_beta(
    asset_returns: Numeric,
    bench_returns: Numeric,
    min_samples: int = MIN_BETA_SAMPLES,
) -> float | None:
    """Return ``cov(asset, bench) / var(bench)`` over the shared trailing window.

    Both series are aligned from their most recent end. ``None`` means the beta
    is undefined: too few shared samples, or a benchmark without variance.
    """
    asset = np.asarray(asset_returns, dtype=float)
    bench = np.asarray(bench_returns, dtype=float)
    n = min(asset.size, bench.size)
    if n < min_samples:
        return None

    asset_tail = asset[asset.size - n :]
    bench_tail = bench[bench.size - n :]

    # Constant input can leave float residue in the variance; test the spread exactly.
    if np.ptp(bench_tail) == 0:
        return None
    bench_variance = variance(bench_tail)
    if not math.isfinite(bench_variance) or bench_variance == 0:
        return None
    beta = covariance(asset_tail, bench_tail) / bench_variance
    return beta if math.isfinite(beta) else None
