"""Stock data sources.

All sources implement the StockDataSource ABC:

- MockStockDataSource: random stocks after a random delay, fails at random
- HttpStockDataSource: the stock tracker REST API

Example:
    source = get_data_source(get_settings())
    stocks = await source.fetch(profile)
"""

from stock_tracker.config import Settings
from stock_tracker.data.sources.base import StockDataSource
from stock_tracker.data.sources.http import HttpStockDataSource
from stock_tracker.data.sources.mock import MockStockDataSource

DATA_SOURCES = ("mock", "http")


def get_data_source(settings: Settings) -> StockDataSource:
    """Build the data source selected by ``settings.data_source``.

    Raises:
        ValueError: if the source name is unknown
    """
    name = settings.data_source.lower()
    if name == "mock":
        return MockStockDataSource(
            failure_rate=settings.mock_failure_rate,
            max_delay_seconds=settings.mock_max_delay_seconds,
        )
    if name == "http":
        return HttpStockDataSource(
            base_url=settings.api_base_url,
            timeout=settings.api_timeout_seconds,
        )
    raise ValueError(
        f"Unknown data source: {settings.data_source}. Available: {', '.join(DATA_SOURCES)}"
    )


__all__ = [
    "StockDataSource",
    "MockStockDataSource",
    "HttpStockDataSource",
    "get_data_source",
    "DATA_SOURCES",
]
