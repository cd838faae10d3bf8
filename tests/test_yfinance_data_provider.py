from __future__ import annotations

import sys
from datetime import date
from types import SimpleNamespace

import pandas as pd
import pytest

from betarank.data.yfinance_data import YFinanceDataProvider
from betarank.domain.models import FetchWindow
from betarank.errors import DataProviderError, ProviderResponseError


def _history(count: int = 30) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Open": [10.0 + index for index in range(count)],
            "High": [11.0 + index for index in range(count)],
            "Low": [9.0 + index for index in range(count)],
            "Close": [10.5 + index for index in range(count)],
        },
        index=pd.date_range("2025-01-01", periods=count, freq="D"),
    )


def test_yfinance_symbol_mapping_supports_crypto_and_equities() -> None:
    assert YFinanceDataProvider.resolve_yfinance_symbol("BTC", "USDT") == "BTC-USD"
    assert YFinanceDataProvider.resolve_yfinance_symbol("eth", "EUR") == "ETH-EUR"
    assert YFinanceDataProvider.resolve_yfinance_symbol("SPY", "USD", "equity") == "SPY"


def test_yfinance_provider_returns_close_series(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}
    history = _history()

    class FakeTicker:
        def __init__(self, ticker: str) -> None:
            captured["ticker"] = ticker

        def history(self, **kwargs: object) -> pd.DataFrame:
            captured.update(kwargs)
            return history

    monkeypatch.setitem(sys.modules, "yfinance", SimpleNamespace(Ticker=FakeTicker))
    provider = YFinanceDataProvider()

    closes = provider.fetch_closes("BTC", "USDT", FetchWindow.trailing(25))

    assert captured["ticker"] == "BTC-USD"
    assert captured["period"] == "25d"
    assert captured["interval"] == "1d"
    assert len(closes) == 25
    assert float(closes.iloc[-1]) == 39.5
    assert str(closes.index.tz) == "UTC"


def test_equity_window_requests_extra_calendar_days(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    class FakeTicker:
        def __init__(self, _ticker: str) -> None:
            return None

        def history(self, **kwargs: object) -> pd.DataFrame:
            captured.update(kwargs)
            return _history()

    monkeypatch.setitem(sys.modules, "yfinance", SimpleNamespace(Ticker=FakeTicker))
    provider = YFinanceDataProvider(asset_class="equity")

    provider.fetch_closes("SPY", "USD", FetchWindow.trailing(20))

    assert captured["period"] == "35d"


def test_date_range_window_passes_start_and_end(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    class FakeTicker:
        def __init__(self, _ticker: str) -> None:
            return None

        def history(self, **kwargs: object) -> pd.DataFrame:
            captured.update(kwargs)
            return _history()

    monkeypatch.setitem(sys.modules, "yfinance", SimpleNamespace(Ticker=FakeTicker))
    provider = YFinanceDataProvider()

    provider.fetch_closes("BTC", "USD", FetchWindow.between(date(2025, 1, 1), date(2025, 1, 30)))

    assert captured["start"] == "2025-01-01"
    assert captured["end"] == "2025-01-31"
    assert "period" not in captured


def test_empty_history_is_a_response_error(monkeypatch: pytest.MonkeyPatch) -> None:
    class FakeTicker:
        def __init__(self, _ticker: str) -> None:
            return None

        def history(self, **_kwargs: object) -> pd.DataFrame:
            return pd.DataFrame()

    monkeypatch.setitem(sys.modules, "yfinance", SimpleNamespace(Ticker=FakeTicker))

    with pytest.raises(ProviderResponseError, match="no rows"):
        YFinanceDataProvider().fetch_closes("BTC", "USD", FetchWindow.trailing(30))


def test_request_failure_is_a_provider_error(monkeypatch: pytest.MonkeyPatch) -> None:
    class FakeTicker:
        def __init__(self, _ticker: str) -> None:
            return None

        def history(self, **_kwargs: object) -> pd.DataFrame:
            raise RuntimeError("rate limited")

    monkeypatch.setitem(sys.modules, "yfinance", SimpleNamespace(Ticker=FakeTicker))

    with pytest.raises(DataProviderError, match="rate limited"):
        YFinanceDataProvider().fetch_closes("BTC", "USD", FetchWindow.trailing(30))


def test_rejects_unknown_asset_class() -> None:
    with pytest.raises(ValueError):
        YFinanceDataProvider(asset_class="bonds")
