"""Environment and CLI runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Self

from dotenv import load_dotenv

from betarank.analytics.beta import MIN_BETA_SAMPLES
from betarank.errors import ConfigError

PRICE_SOURCES = ("binance", "coingecko", "yfinance", "alpaca", "csv")


def parse_bool(value: str | None, default: bool) -> bool:
    """Parse truthy environment strings."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_tickers(value: str | None, default: list[str] | None = None) -> list[str]:
    """Parse comma-separated tickers."""
    fallback = default or []
    if not value:
        return list(fallback)
    tickers = [item.strip().upper() for item in value.split(",") if item.strip()]
    return tickers or list(fallback)


def parse_weights(value: str | None, default: tuple[float, float] = (0.5, 0.5)) -> tuple[float, float]:
    """Parse two comma-separated score weights."""
    if value is None or not value.strip():
        return default
    parts = [item.strip() for item in value.split(",") if item.strip()]
    if len(parts) != 2:
        raise ConfigError("SCORE_WEIGHTS must hold exactly two comma-separated numbers")
    try:
        return float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise ConfigError(f"SCORE_WEIGHTS is not numeric: {value}") from exc


def parse_benchmarks(value: str) -> tuple[str, str]:
    """Parse ``PRIMARY,SECONDARY`` benchmark symbols."""
    parts = [item.strip().upper() for item in value.split(",") if item.strip()]
    if len(parts) != 2:
        raise ConfigError("benchmarks must be given as PRIMARY,SECONDARY")
    return parts[0], parts[1]


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    price_source: str = "binance"
    quote_currency: str = "USDT"
    primary_benchmark: str = "BTC"
    secondary_benchmark: str = "ETH"
    tickers: list[str] = field(default_factory=list)
    default_lookback_days: int = 90
    min_lookback_days: int = 20
    min_candles: int = 20
    window_buffer_days: int = 5
    max_workers: int = 4
    fetch_timeout_seconds: float = 20.0
    max_retries: int = 3
    score_weights: tuple[float, float] = (0.5, 0.5)
    score_absolute: bool = True
    binance_base_url: str = "https://api.binance.com"
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    coingecko_api_key: str = ""
    alpaca_api_key: str = ""
    alpaca_secret_key: str = ""
    alpaca_data_url: str = "https://data.alpaca.markets"
    asset_class: str = "crypto"
    historical_data_dir: str = "historical_data"
    log_level: str = "INFO"
    log_file: str | None = None

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        load_dotenv()
        raw = cls(
            price_source=str(os.getenv("PRICE_SOURCE", "binance")).strip().lower(),
            quote_currency=str(os.getenv("QUOTE_CURRENCY", "USDT")).strip().upper(),
            primary_benchmark=str(os.getenv("PRIMARY_BENCHMARK", "BTC")).strip().upper(),
            secondary_benchmark=str(os.getenv("SECONDARY_BENCHMARK", "ETH")).strip().upper(),
            tickers=parse_tickers(os.getenv("TICKERS")),
            default_lookback_days=_env_int("DEFAULT_LOOKBACK_DAYS", 90),
            min_lookback_days=_env_int("MIN_LOOKBACK_DAYS", 20),
            min_candles=_env_int("MIN_CANDLES", 20),
            window_buffer_days=_env_int("WINDOW_BUFFER_DAYS", 5),
            max_workers=_env_int("MAX_WORKERS", 4),
            fetch_timeout_seconds=_env_float("FETCH_TIMEOUT_SECONDS", 20.0),
            max_retries=_env_int("MAX_RETRIES", 3),
            score_weights=parse_weights(os.getenv("SCORE_WEIGHTS")),
            score_absolute=parse_bool(os.getenv("SCORE_ABSOLUTE"), True),
            binance_base_url=str(
                os.getenv("BINANCE_BASE_URL", "https://api.binance.com")
            ).strip(),
            coingecko_base_url=str(
                os.getenv("COINGECKO_BASE_URL", "https://api.coingecko.com/api/v3")
            ).strip(),
            coingecko_api_key=str(os.getenv("COINGECKO_API_KEY", "")).strip(),
            alpaca_api_key=str(os.getenv("ALPACA_API_KEY", "")).strip(),
            alpaca_secret_key=str(os.getenv("ALPACA_SECRET_KEY", "")).strip(),
            alpaca_data_url=str(
                os.getenv("ALPACA_DATA_URL", "https://data.alpaca.markets")
            ).strip(),
            asset_class=str(os.getenv("ASSET_CLASS", "crypto")).strip().lower(),
            historical_data_dir=str(os.getenv("HISTORICAL_DATA_DIR", "historical_data")).strip(),
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
            log_file=str(os.getenv("LOG_FILE", "")).strip() or None,
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        updated = replace(self, **kwargs)
        return updated.validate()

    def validate(self) -> Self:
        """Validate settings fields."""
        if self.price_source not in PRICE_SOURCES:
            raise ConfigError(f"PRICE_SOURCE must be one of: {', '.join(PRICE_SOURCES)}")
        if not self.quote_currency:
            raise ConfigError("QUOTE_CURRENCY must not be empty")
        if not self.primary_benchmark or not self.secondary_benchmark:
            raise ConfigError("PRIMARY_BENCHMARK and SECONDARY_BENCHMARK must not be empty")
        if self.primary_benchmark == self.secondary_benchmark:
            raise ConfigError("PRIMARY_BENCHMARK and SECONDARY_BENCHMARK must differ")
        if self.min_lookback_days < MIN_BETA_SAMPLES:
            raise ConfigError(f"MIN_LOOKBACK_DAYS must be at least {MIN_BETA_SAMPLES}")
        if self.default_lookback_days <= 0:
            raise ConfigError("DEFAULT_LOOKBACK_DAYS must be a positive integer")
        if self.min_candles < 2:
            raise ConfigError("MIN_CANDLES must be at least 2")
        if self.window_buffer_days < 1:
            raise ConfigError("WINDOW_BUFFER_DAYS must be at least 1")
        if self.max_workers <= 0:
            raise ConfigError("MAX_WORKERS must be a positive integer")
        if self.max_retries <= 0:
            raise ConfigError("MAX_RETRIES must be a positive integer")
        if self.fetch_timeout_seconds <= 0:
            raise ConfigError("FETCH_TIMEOUT_SECONDS must be positive")
        if len(self.score_weights) != 2:
            raise ConfigError("SCORE_WEIGHTS must hold exactly two numbers")
        if any(weight < 0 for weight in self.score_weights) or sum(self.score_weights) <= 0:
            raise ConfigError("SCORE_WEIGHTS must be non-negative with a positive sum")
        if self.asset_class not in {"crypto", "equity"}:
            raise ConfigError("ASSET_CLASS must be one of: crypto, equity")
        if self.price_source == "alpaca" and (
            not self.alpaca_api_key or not self.alpaca_secret_key
        ):
            raise ConfigError("ALPACA_API_KEY and ALPACA_SECRET_KEY are required for Alpaca data")
        return self
