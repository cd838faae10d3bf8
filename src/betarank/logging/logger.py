"""Concise human-readable ranking logger."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from betarank.domain.models import RankResult, RankRow


class HumanLogger:
    """Console logger with fixed line types."""

    def __init__(self, level: str = "INFO", log_file: str | None = None) -> None:
        self._logger = logging.getLogger("betarank")
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self._logger.propagate = False
        if not self._logger.handlers:
            formatter = logging.Formatter(
                "%(asctime)s | %(levelname)s | %(message)s", "%Y-%m-%d %H:%M:%S"
            )
            handler = logging.StreamHandler()
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)
            if log_file:
                file_handler = logging.FileHandler(log_file)
                file_handler.setFormatter(formatter)
                self._logger.addHandler(file_handler)

    def request_started(
        self,
        tickers: list[str],
        lookback_days: int,
        requested_lookback: object = None,
    ) -> None:
        parts = [f"rank | {len(tickers)} tickers | lookback {lookback_days}d"]
        if requested_lookback is not None and requested_lookback != lookback_days:
            parts.append(f"requested {requested_lookback}")
        self._logger.info(" | ".join(parts))

    def benchmark_loaded(self, name: str, base: str, returns: int) -> None:
        self._logger.info("benchmark | %s (%s) | %s returns", name, base, returns)

    def ticker_skipped(self, raw: object) -> None:
        self._logger.debug("skip | unparseable ticker %r", raw)

    def ticker_failed(self, ticker: str, message: str) -> None:
        self._logger.warning("failed | %s | %s", ticker, message)

    def ticker_scored(self, row: RankRow) -> None:
        self._logger.debug(
            "scored | %s | beta %s / %s | score %s",
            row.ticker,
            self._format_value(row.beta_primary),
            self._format_value(row.beta_secondary),
            self._format_value(row.score),
        )

    def request_finished(self, result: RankResult) -> None:
        scored = sum(1 for row in result.rows if row.score is not None)
        failed = sum(1 for row in result.rows if row.error is not None)
        parts = [f"done | {len(result.rows)} rows | scored {scored}"]
        if failed:
            parts.append(f"failed {failed}")
        if result.rows and result.rows[0].score is not None:
            top = result.rows[0]
            parts.append(f"top {top.ticker} {self._format_value(top.score)}")
        self._logger.info(" | ".join(parts))

    def error(self, message: str) -> None:
        self._logger.error("error | %s", message)

    @staticmethod
    def _format_value(value: float | None, precision: int = 4) -> str:
        if value is None:
            return "n/a"
        return f"{value:.{precision}f}"
