"""Rank assets by beta against two benchmark assets."""

from betarank.domain.models import Benchmark, FetchWindow, RankResult, RankRow
from betarank.ranking.pipeline import RankingPipeline
from betarank.ranking.scoring import ScorePolicy

__version__ = "0.1.0"

__all__ = [
    "Benchmark",
    "FetchWindow",
    "RankResult",
    "RankRow",
    "RankingPipeline",
    "ScorePolicy",
    "__version__",
]
