"""Command-line interface for beta ranking."""

from __future__ import annotations

import argparse
import sys

from betarank.config import PRICE_SOURCES, Settings, parse_benchmarks, parse_tickers
from betarank.runtime import OUTPUT_FORMATS, run


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Rank tickers by beta against two benchmark assets"
    )
    parser.add_argument("tickers", nargs="*", help="Tickers to rank, e.g. BINANCE:SOLUSDT ETHUSDT")
    parser.add_argument("--tickers", dest="ticker_list", type=str, help="Comma-separated tickers")
    parser.add_argument("--lookback-days", type=int, help="Number of daily returns to regress on")
    parser.add_argument("--source", choices=list(PRICE_SOURCES), help="Price data source")
    parser.add_argument("--quote", type=str, help="Quote currency used for price lookups")
    parser.add_argument(
        "--benchmarks",
        type=str,
        help="Primary and secondary benchmark symbols, e.g. BTC,ETH",
    )
    parser.add_argument("--historical-dir", type=str, help="CSV historical data directory")
    parser.add_argument("--max-workers", type=int, help="Concurrent ticker fetches")
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=list(OUTPUT_FORMATS),
        default="table",
        help="Output format",
    )
    parser.add_argument("--report", type=str, help="Write a Plotly HTML report to this path")
    parser.add_argument("--log-level", type=str, help="Logging level")
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    overrides: dict[str, object] = {}
    if args.source:
        overrides["price_source"] = args.source
    if args.quote:
        overrides["quote_currency"] = args.quote.strip().upper()
    if args.benchmarks:
        primary, secondary = parse_benchmarks(args.benchmarks)
        overrides["primary_benchmark"] = primary
        overrides["secondary_benchmark"] = secondary
    if args.historical_dir:
        overrides["historical_data_dir"] = args.historical_dir
    if args.max_workers is not None:
        overrides["max_workers"] = args.max_workers
    if args.log_level:
        overrides["log_level"] = args.log_level.strip().upper()
    return settings.with_overrides(**overrides)


def resolve_tickers(settings: Settings, args: argparse.Namespace) -> list[str]:
    """Combine positional and ``--tickers`` values, falling back to TICKERS."""
    tickers = [*args.tickers, *parse_tickers(args.ticker_list)]
    if tickers:
        return tickers
    if settings.tickers:
        return list(settings.tickers)
    raise ValueError("No tickers given. Pass them as arguments, via --tickers, or set TICKERS")


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
        tickers = resolve_tickers(settings, args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 2
    return run(
        settings,
        tickers,
        lookback_days=args.lookback_days,
        output_format=args.output_format,
        report_path=args.report,
    )


if __name__ == "__main__":
    sys.exit(main())
