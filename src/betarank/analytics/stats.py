"""Sample statistics over in-memory numeric sequences."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from betarank.errors import EmptyInputError, InsufficientDataError, LengthMismatchError

Numeric = Sequence[float] | np.ndarray


def _as_array(values: Numeric) -> np.ndarray:
    array = np.asarray(values, dtype=float)
    if array.ndim != 1:
        raise ValueError("statistics operate on one-dimensional sequences")
    return array


def mean(values: Numeric) -> float:
    """Arithmetic mean."""
    data = _as_array(values)
    if data.size == 0:
        raise EmptyInputError("mean of an empty sequence is undefined")
    return float(np.mean(data))


def variance(values: Numeric) -> float:
    """Sample variance with an ``n - 1`` divisor."""
    data = _as_array(values)
    if data.size < 2:
        raise InsufficientDataError(f"variance needs at least 2 values, got {data.size}")
    return float(np.var(data, ddof=1))


def covariance(left: Numeric, right: Numeric) -> float:
    """Sample covariance with an ``n - 1`` divisor."""
    a = _as_array(left)
    b = _as_array(right)
    if a.size != b.size:
        raise LengthMismatchError(
            f"covariance needs equal lengths, got {a.size} and {b.size}"
        )
    if a.size < 2:
        raise InsufficientDataError(f"covariance needs at least 2 values, got {a.size}")
    return float(np.sum((a - a.mean()) * (b - b.mean())) / (a.size - 1))
