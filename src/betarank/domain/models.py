"""Core ranking domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

import pandas as pd


@dataclass(frozen=True)
class Benchmark:
    """Named benchmark asset used as a regression reference."""

    name: str
    base: str


@dataclass(frozen=True)
class FetchWindow:
    """Price window requested from a provider.

    Either ``candles`` (trailing daily closes, most recent last) or an explicit
    ``start``/``end`` date range is set, never both.
    """

    candles: int | None = None
    start: date | None = None
    end: date | None = None

    def __post_init__(self) -> None:
        if self.candles is None and (self.start is None or self.end is None):
            raise ValueError("FetchWindow needs a candle count or a start/end range")
        if self.candles is not None and (self.start is not None or self.end is not None):
            raise ValueError("FetchWindow takes a candle count or a date range, not both")
        if self.candles is not None and self.candles <= 0:
            raise ValueError("candles must be positive")
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError("start must not be after end")

    @classmethod
    def trailing(cls, candles: int) -> FetchWindow:
        return cls(candles=candles)

    @classmethod
    def between(cls, start: date, end: date) -> FetchWindow:
        return cls(start=start, end=end)

    @property
    def is_range(self) -> bool:
        return self.candles is None


@dataclass(frozen=True)
class RankRow:
    """One ticker's ranking outcome."""

    ticker: str
    base: str
    beta_primary: float | None = None
    beta_secondary: float | None = None
    score: float | None = None
    error: str | None = None
    rank: int | None = None

    @classmethod
    def failed(cls, ticker: str, base: str, error: str) -> RankRow:
        """Build an error row with every numeric field absent."""
        return cls(ticker=ticker, base=base, error=error)

    def to_record(self) -> dict[str, Any]:
        """Convert row to serializable dict."""
        return {
            "rank": self.rank,
            "ticker": self.ticker,
            "base": self.base,
            "betaPrimary": self.beta_primary,
            "betaSecondary": self.beta_secondary,
            "score": self.score,
            "error": self.error,
        }


@dataclass(frozen=True)
class RankResult:
    """Ordered outcome of one ranking request."""

    lookback_days: int
    benchmarks: tuple[Benchmark, Benchmark]
    rows: list[RankRow] = field(default_factory=list)

    def to_records(self) -> dict[str, Any]:
        """Return the JSON envelope for transport layers."""
        primary, secondary = self.benchmarks
        return {
            "lookbackDays": self.lookback_days,
            "benchmarks": {"primary": primary.base, "secondary": secondary.base},
            "rows": [row.to_record() for row in self.rows],
        }

    def to_frame(self) -> pd.DataFrame:
        """Return rows as a DataFrame, one line per ticker in rank order."""
        primary, secondary = self.benchmarks
        columns = [
            "rank",
            "ticker",
            "base",
            f"beta_{primary.base}",
            f"beta_{secondary.base}",
            "score",
            "error",
        ]
        records = [
            [
                row.rank,
                row.ticker,
                row.base,
                row.beta_primary,
                row.beta_secondary,
                row.score,
                row.error,
            ]
            for row in self.rows
        ]
        return pd.DataFrame(records, columns=columns)
