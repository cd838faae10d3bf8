"""Composite score policy and rank assignment."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, replace

from betarank.domain.models import RankRow


@dataclass(frozen=True)
class ScorePolicy:
    """Weighted mean of benchmark betas.

    The defaults (equal weights, absolute values) score a ticker by its mean
    absolute beta, so strong sensitivity in either direction ranks high.
    """

    weights: tuple[float, float] = (0.5, 0.5)
    use_absolute: bool = True

    def __post_init__(self) -> None:
        if len(self.weights) != 2:
            raise ValueError("score policy needs exactly two weights")
        if any(weight < 0 or not math.isfinite(weight) for weight in self.weights):
            raise ValueError("score weights must be finite and non-negative")
        if sum(self.weights) <= 0:
            raise ValueError("score weights must have a positive sum")

    def score(self, betas: Sequence[float | None]) -> float | None:
        """Return the composite score, or ``None`` unless every beta is defined."""
        if len(betas) != len(self.weights):
            raise ValueError(f"expected {len(self.weights)} betas, got {len(betas)}")
        if any(beta is None for beta in betas):
            return None
        values = [abs(beta) if self.use_absolute else beta for beta in betas]
        total = sum(weight * value for weight, value in zip(self.weights, values, strict=True))
        return total / sum(self.weights)


def score_sort_key(row: RankRow) -> tuple[int, float]:
    """Sort key placing scored rows first by descending score, absent scores last."""
    if row.score is None:
        return (1, 0.0)
    return (0, -row.score)


def assign_ranks(rows: Sequence[RankRow]) -> list[RankRow]:
    """Stable-sort rows by score and attach 1-based ranks.

    Ties keep their input order.
    """
    ordered = sorted(rows, key=score_sort_key)
    return [replace(row, rank=position) for position, row in enumerate(ordered, start=1)]
