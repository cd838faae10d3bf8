"""Beta ranking pipeline and scoring rules."""

from .pipeline import RankingPipeline, resolve_lookback_days
from .scoring import ScorePolicy, assign_ranks, score_sort_key

__all__ = [
    "RankingPipeline",
    "ScorePolicy",
    "assign_ranks",
    "resolve_lookback_days",
    "score_sort_key",
]
