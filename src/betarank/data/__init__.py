"""Price series provider implementations."""

from .alpaca_market_data import AlpacaMarketDataProvider
from .base import PriceSeriesProvider, finalize_closes
from .binance_data import BinanceDataProvider
from .coingecko_data import CoinGeckoDataProvider
from .csv_data import CsvDataProvider
from .http_client import JsonHttpClient
from .symbol_cache import SymbolCache
from .yfinance_data import YFinanceDataProvider

__all__ = [
    "PriceSeriesProvider",
    "AlpacaMarketDataProvider",
    "BinanceDataProvider",
    "CoinGeckoDataProvider",
    "CsvDataProvider",
    "JsonHttpClient",
    "SymbolCache",
    "YFinanceDataProvider",
    "finalize_closes",
]
