from __future__ import annotations

from datetime import date
from pathlib import Path

import pandas as pd
import pytest

from betarank.data.csv_data import CsvDataProvider
from betarank.domain.models import FetchWindow
from betarank.errors import DataProviderError, InsufficientDataError, ProviderResponseError


def _write_csv(path: Path, count: int = 30, close_column: str = "close") -> None:
    frame = pd.DataFrame(
        {
            "date": pd.date_range("2025-01-01", periods=count, freq="D").strftime("%Y-%m-%d"),
            "open": [100.0 + index for index in range(count)],
            close_column: [100.5 + index for index in range(count)],
        }
    )
    # Stored newest first to check that closes come back oldest first.
    frame.iloc[::-1].to_csv(path, index=False)


def test_csv_provider_prefers_pair_file(tmp_path: Path) -> None:
    _write_csv(tmp_path / "SOLUSDT.csv", count=30)
    _write_csv(tmp_path / "SOL.csv", count=40)
    provider = CsvDataProvider(data_dir=str(tmp_path))

    closes = provider.fetch_closes("SOL", "USDT", FetchWindow.trailing(25))

    assert len(closes) == 25
    assert closes.index.is_monotonic_increasing
    assert float(closes.iloc[-1]) == 129.5


def test_csv_provider_falls_back_to_base_file(tmp_path: Path) -> None:
    _write_csv(tmp_path / "spy.csv", count=22, close_column="Adj Close")
    provider = CsvDataProvider(data_dir=str(tmp_path))

    closes = provider.fetch_closes("SPY", "USD", FetchWindow.trailing(50))

    assert len(closes) == 22


def test_csv_provider_filters_date_range(tmp_path: Path) -> None:
    _write_csv(tmp_path / "BTC.csv", count=60)
    provider = CsvDataProvider(data_dir=str(tmp_path))

    closes = provider.fetch_closes(
        "BTC", "USDT", FetchWindow.between(date(2025, 1, 11), date(2025, 2, 4))
    )

    assert len(closes) == 25
    assert float(closes.iloc[0]) == 110.5


def test_csv_provider_missing_file(tmp_path: Path) -> None:
    provider = CsvDataProvider(data_dir=str(tmp_path))

    with pytest.raises(DataProviderError, match="No CSV found"):
        provider.fetch_closes("NOPE", "USDT", FetchWindow.trailing(30))


def test_csv_provider_missing_close_column(tmp_path: Path) -> None:
    pd.DataFrame({"date": ["2025-01-01"], "open": [1.0]}).to_csv(tmp_path / "X.csv", index=False)
    provider = CsvDataProvider(data_dir=str(tmp_path))

    with pytest.raises(ProviderResponseError, match="close column"):
        provider.fetch_closes("X", "USDT", FetchWindow.trailing(30))


def test_csv_provider_enforces_minimum_candles(tmp_path: Path) -> None:
    _write_csv(tmp_path / "ADA.csv", count=10)
    provider = CsvDataProvider(data_dir=str(tmp_path), min_candles=20)

    with pytest.raises(InsufficientDataError):
        provider.fetch_closes("ADA", "USDT", FetchWindow.trailing(30))
