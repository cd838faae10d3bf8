"""Domain models."""

from .models import Benchmark, FetchWindow, RankResult, RankRow

__all__ = [
    "Benchmark",
    "FetchWindow",
    "RankResult",
    "RankRow",
]
