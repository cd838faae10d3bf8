"""Beta ranking orchestration."""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

import numpy as np
import pandas as pd

from betarank.analytics.beta import MIN_BETA_SAMPLES, estimate_beta
from betarank.analytics.returns import aligned_log_returns, log_returns, trailing
from betarank.data.base import PriceSeriesProvider
from betarank.domain.models import Benchmark, FetchWindow, RankResult, RankRow
from betarank.errors import BenchmarkUnavailableError, InvalidRequestError
from betarank.logging.logger import HumanLogger
from betarank.ranking.scoring import ScorePolicy, assign_ranks
from betarank.symbols import normalize_ticker, to_base_symbol

DEFAULT_LOOKBACK_DAYS = 90
MIN_LOOKBACK_DAYS = 20


def resolve_lookback_days(
    value: object,
    default: int = DEFAULT_LOOKBACK_DAYS,
    minimum: int = MIN_LOOKBACK_DAYS,
) -> int:
    """Return the effective lookback: invalid values use ``default``, then floor at ``minimum``."""
    days: int | None = None
    if isinstance(value, int) and not isinstance(value, bool):
        days = value
    elif isinstance(value, str) and value.strip().isdigit():
        days = int(value.strip())
    if days is None or days <= 0:
        days = default
    return max(minimum, days)


class RankingPipeline:
    """Rank tickers by their beta against two benchmarks.

    One pipeline may serve many requests; it keeps no per-request state.
    Network fetches fan out on a thread pool, statistics run on the caller's
    thread as results are collected.
    """

    def __init__(
        self,
        provider: PriceSeriesProvider,
        benchmarks: tuple[Benchmark, Benchmark],
        quote: str = "USDT",
        score_policy: ScorePolicy | None = None,
        default_lookback_days: int = DEFAULT_LOOKBACK_DAYS,
        min_lookback_days: int = MIN_LOOKBACK_DAYS,
        window_buffer_days: int = 5,
        max_workers: int = 4,
        fetch_timeout: float | None = 20.0,
        logger: HumanLogger | None = None,
    ) -> None:
        if len(benchmarks) != 2:
            raise ValueError("exactly two benchmarks are required")
        if min_lookback_days < MIN_BETA_SAMPLES:
            raise ValueError(f"min_lookback_days must be at least {MIN_BETA_SAMPLES}")
        if window_buffer_days < 1:
            raise ValueError("window_buffer_days must be at least 1")
        if max_workers <= 0:
            raise ValueError("max_workers must be positive")
        self.provider = provider
        self.benchmarks = benchmarks
        self.quote = quote.strip().upper()
        self.score_policy = score_policy or ScorePolicy()
        self.default_lookback_days = default_lookback_days
        self.min_lookback_days = min_lookback_days
        self.window_buffer_days = window_buffer_days
        self.max_workers = max_workers
        self.fetch_timeout = fetch_timeout
        self.logger = logger or HumanLogger()

    def rank(self, tickers: Sequence[object], lookback_days: object = None) -> RankResult:
        """Rank ``tickers`` by composite beta score over ``lookback_days`` returns."""
        if not isinstance(tickers, (list, tuple)):
            raise InvalidRequestError("tickers must be a list of symbol strings")
        if not tickers:
            raise InvalidRequestError("tickers must not be empty")

        lookback = resolve_lookback_days(
            lookback_days,
            default=self.default_lookback_days,
            minimum=self.min_lookback_days,
        )
        # Closes for `lookback` returns plus slack for provider off-by-one conventions.
        window = FetchWindow.trailing(lookback + self.window_buffer_days)

        requests: list[tuple[str, str]] = []
        for raw in tickers:
            base = to_base_symbol(raw)
            if not base:
                self.logger.ticker_skipped(raw)
                continue
            requests.append((normalize_ticker(raw), base))
        self.logger.request_started([ticker for ticker, _ in requests], lookback, lookback_days)

        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        try:
            bench_closes = self._load_benchmarks(executor, window, lookback)
            loaded = {
                benchmark.base: closes for benchmark, closes in zip(self.benchmarks, bench_closes)
            }
            futures = [
                (ticker, base, self._submit(executor, base, window, loaded))
                for ticker, base in requests
            ]
            rows = [
                self._score_ticker(ticker, base, future, bench_closes, lookback)
                for ticker, base, future in futures
            ]
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        result = RankResult(
            lookback_days=lookback,
            benchmarks=self.benchmarks,
            rows=assign_ranks(rows),
        )
        self.logger.request_finished(result)
        return result

    def _submit(
        self,
        executor: ThreadPoolExecutor,
        base: str,
        window: FetchWindow,
        loaded: dict[str, pd.Series],
    ) -> Future[pd.Series]:
        if base in loaded:
            # Benchmark bases reuse the series already fetched for this request.
            future: Future[pd.Series] = Future()
            future.set_result(loaded[base])
            return future
        return executor.submit(self.provider.fetch_closes, base, self.quote, window)

    def _load_benchmarks(
        self,
        executor: ThreadPoolExecutor,
        window: FetchWindow,
        lookback: int,
    ) -> tuple[pd.Series, pd.Series]:
        pending = [
            (benchmark, executor.submit(self.provider.fetch_closes, benchmark.base, self.quote, window))
            for benchmark in self.benchmarks
        ]
        loaded: list[pd.Series] = []
        for benchmark, future in pending:
            try:
                closes = self._await(future)
                returns = trailing(log_returns(closes), lookback)
            except Exception as exc:
                self.logger.error(f"benchmark {benchmark.name} ({benchmark.base}) unavailable: {exc}")
                raise BenchmarkUnavailableError(
                    f"benchmark {benchmark.name} ({benchmark.base}) unavailable: {exc}"
                ) from exc
            self.logger.benchmark_loaded(benchmark.name, benchmark.base, len(returns))
            loaded.append(closes)
        return loaded[0], loaded[1]

    def _score_ticker(
        self,
        ticker: str,
        base: str,
        future: Future[pd.Series],
        bench_closes: tuple[pd.Series, pd.Series],
        lookback: int,
    ) -> RankRow:
        try:
            closes = self._await(future)
            log_returns(closes)  # rejects series shorter than two closes
            betas = [self._beta(closes, bench, lookback) for bench in bench_closes]
        except Exception as exc:
            message = self._describe(exc)
            self.logger.ticker_failed(ticker, message)
            return RankRow.failed(ticker=ticker, base=base, error=message)

        row = RankRow(
            ticker=ticker,
            base=base,
            beta_primary=betas[0],
            beta_secondary=betas[1],
            score=self.score_policy.score(betas),
        )
        self.logger.ticker_scored(row)
        return row

    @staticmethod
    def _beta(closes: pd.Series, bench_closes: pd.Series, lookback: int) -> float | None:
        shared = aligned_log_returns(closes, bench_closes).iloc[-lookback:]
        asset = shared["asset"].to_numpy()
        if asset.size and np.ptp(asset) == 0:
            # Flat prices carry no co-movement signal.
            return None
        return estimate_beta(asset, shared["bench"].to_numpy())

    def _await(self, future: Future[pd.Series]) -> pd.Series:
        try:
            return future.result(timeout=self.fetch_timeout)
        except FutureTimeoutError as exc:
            future.cancel()
            raise TimeoutError(f"fetch timed out after {self.fetch_timeout}s") from exc

    @staticmethod
    def _describe(exc: Exception) -> str:
        text = str(exc).strip()
        return text or type(exc).__name__
