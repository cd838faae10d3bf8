"""Runtime wiring for ranking requests."""

from __future__ import annotations

import json
from collections.abc import Sequence

from betarank.config import Settings
from betarank.data.alpaca_market_data import AlpacaMarketDataProvider
from betarank.data.base import PriceSeriesProvider
from betarank.data.binance_data import BinanceDataProvider
from betarank.data.coingecko_data import CoinGeckoDataProvider
from betarank.data.csv_data import CsvDataProvider
from betarank.data.symbol_cache import SymbolCache
from betarank.data.yfinance_data import YFinanceDataProvider
from betarank.domain.models import Benchmark, RankResult
from betarank.errors import BetaRankError
from betarank.logging.logger import HumanLogger
from betarank.ranking.pipeline import RankingPipeline
from betarank.ranking.scoring import ScorePolicy
from betarank.report import write_ranking_report

OUTPUT_FORMATS = ("table", "json", "csv")


def build_price_provider(
    settings: Settings,
    symbol_cache: SymbolCache | None = None,
) -> PriceSeriesProvider:
    """Select the configured price series provider."""
    source = settings.price_source
    if source == "binance":
        return BinanceDataProvider(
            base_url=settings.binance_base_url,
            timeout=settings.fetch_timeout_seconds,
            max_retries=settings.max_retries,
            min_candles=settings.min_candles,
        )
    if source == "coingecko":
        return CoinGeckoDataProvider(
            base_url=settings.coingecko_base_url,
            api_key=settings.coingecko_api_key,
            timeout=settings.fetch_timeout_seconds,
            max_retries=settings.max_retries,
            min_candles=settings.min_candles,
            symbol_cache=symbol_cache,
        )
    if source == "yfinance":
        return YFinanceDataProvider(
            asset_class=settings.asset_class,
            min_candles=settings.min_candles,
        )
    if source == "alpaca":
        return AlpacaMarketDataProvider(
            api_key=settings.alpaca_api_key,
            secret_key=settings.alpaca_secret_key,
            data_base_url=settings.alpaca_data_url,
            asset_class=settings.asset_class,
            timeout=settings.fetch_timeout_seconds,
            max_retries=settings.max_retries,
            min_candles=settings.min_candles,
        )
    if source == "csv":
        return CsvDataProvider(
            data_dir=settings.historical_data_dir,
            min_candles=settings.min_candles,
        )
    raise ValueError(f"Unknown price source '{source}'")


def build_pipeline(
    settings: Settings,
    provider: PriceSeriesProvider | None = None,
    logger: HumanLogger | None = None,
) -> RankingPipeline:
    """Wire a ranking pipeline from settings."""
    return RankingPipeline(
        provider=provider or build_price_provider(settings, symbol_cache=SymbolCache()),
        benchmarks=(
            Benchmark(name="primary", base=settings.primary_benchmark),
            Benchmark(name="secondary", base=settings.secondary_benchmark),
        ),
        quote=settings.quote_currency,
        score_policy=ScorePolicy(
            weights=settings.score_weights,
            use_absolute=settings.score_absolute,
        ),
        default_lookback_days=settings.default_lookback_days,
        min_lookback_days=settings.min_lookback_days,
        window_buffer_days=settings.window_buffer_days,
        max_workers=settings.max_workers,
        fetch_timeout=settings.fetch_timeout_seconds,
        logger=logger or HumanLogger(level=settings.log_level, log_file=settings.log_file),
    )


def render_result(result: RankResult, output_format: str) -> str:
    """Render a ranking result for terminal output."""
    if output_format == "json":
        return json.dumps(result.to_records(), indent=2)
    frame = result.to_frame()
    if output_format == "csv":
        return frame.to_csv(index=False)
    if output_format == "table":
        return frame.to_string(index=False, float_format=lambda value: f"{value:.4f}")
    raise ValueError(f"output format must be one of {', '.join(OUTPUT_FORMATS)}")


def run(
    settings: Settings,
    tickers: Sequence[str],
    lookback_days: int | None = None,
    output_format: str = "table",
    report_path: str | None = None,
    provider: PriceSeriesProvider | None = None,
) -> int:
    """Run one ranking request and print the result."""
    human_logger = HumanLogger(level=settings.log_level, log_file=settings.log_file)
    try:
        pipeline = build_pipeline(settings, provider=provider, logger=human_logger)
        result = pipeline.rank(list(tickers), lookback_days)
    except ValueError as exc:
        human_logger.error(str(exc))
        return 2
    except BetaRankError as exc:
        human_logger.error(str(exc))
        return 1

    print(render_result(result, output_format))
    if report_path:
        written = write_ranking_report(result, report_path)
        print(f"Report written to {written}")
    return 0
