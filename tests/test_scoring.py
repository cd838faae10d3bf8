from __future__ import annotations

import pytest

from betarank.domain.models import RankRow
from betarank.ranking.scoring import ScorePolicy, assign_ranks, score_sort_key


def _row(ticker: str, score: float | None, error: str | None = None) -> RankRow:
    if error is not None:
        return RankRow.failed(ticker=ticker, base=ticker, error=error)
    beta = None if score is None else score
    return RankRow(
        ticker=ticker,
        base=ticker,
        beta_primary=beta,
        beta_secondary=beta,
        score=score,
    )


def test_default_policy_is_mean_absolute_beta() -> None:
    policy = ScorePolicy()

    assert policy.score([1.2, -0.4]) == pytest.approx(0.8)
    assert policy.score([-2.0, -1.0]) == pytest.approx(1.5)


def test_score_is_absent_unless_both_betas_defined() -> None:
    policy = ScorePolicy()

    assert policy.score([None, 1.0]) is None
    assert policy.score([1.0, None]) is None
    assert policy.score([None, None]) is None


def test_weighted_signed_policy() -> None:
    policy = ScorePolicy(weights=(3.0, 1.0), use_absolute=False)

    assert policy.score([1.0, -1.0]) == pytest.approx(0.5)


@pytest.mark.parametrize("weights", [(0.0, 0.0), (-1.0, 2.0), (1.0, float("nan"))])
def test_policy_rejects_bad_weights(weights: tuple[float, float]) -> None:
    with pytest.raises(ValueError):
        ScorePolicy(weights=weights)


def test_assign_ranks_orders_by_descending_score_with_absent_last() -> None:
    rows = [
        _row("LOW", 0.2),
        _row("NONE", None),
        _row("FAIL", None, error="boom"),
        _row("HIGH", 1.4),
        _row("MID", 0.9),
    ]

    ranked = assign_ranks(rows)

    assert [row.ticker for row in ranked] == ["HIGH", "MID", "LOW", "NONE", "FAIL"]
    assert [row.rank for row in ranked] == [1, 2, 3, 4, 5]
    assert all(row.rank is None for row in rows)


def test_ties_keep_input_order() -> None:
    rows = [_row("A", 0.5), _row("B", 0.7), _row("C", 0.5), _row("D", 0.7)]

    ranked = assign_ranks(rows)

    assert [row.ticker for row in ranked] == ["B", "D", "A", "C"]


def test_reranking_ranked_rows_is_idempotent() -> None:
    rows = [_row("A", 0.5), _row("B", None), _row("C", 0.5), _row("D", 2.0), _row("E", None)]

    once = assign_ranks(rows)
    twice = assign_ranks(once)

    assert [row.ticker for row in twice] == [row.ticker for row in once]
    assert [row.rank for row in twice] == [1, 2, 3, 4, 5]


def test_absent_score_sorts_below_any_score() -> None:
    absent = score_sort_key(_row("X", None))
    tiny = score_sort_key(_row("Y", 0.0))

    assert tiny < absent
