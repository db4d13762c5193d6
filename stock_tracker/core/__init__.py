"""Core tracker logic: fetch status, local cache and the refresh coordinator.

Usage:
    from stock_tracker.core import LocalStore, StockTracker
    from stock_tracker.data.sources import MockStockDataSource

    tracker = StockTracker(MockStockDataSource(), LocalStore(path))
    await tracker.refresh()
    print(tracker.status, tracker.last_update_display)
"""

from stock_tracker.core.exceptions import FetchError, StockTrackerError, StorageError
from stock_tracker.core.status import Failed, FetchStatus, Idle, Succeeded, Waiting
from stock_tracker.core.store import LocalStore
from stock_tracker.core.tracker import StockTracker

__all__ = [
    # Errors
    "StockTrackerError",
    "FetchError",
    "StorageError",
    # Status
    "FetchStatus",
    "Idle",
    "Waiting",
    "Succeeded",
    "Failed",
    # Services
    "LocalStore",
    "StockTracker",
]
