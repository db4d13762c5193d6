"""Base stock data source abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from stock_tracker.data.models import TrackedStock, UserProfile


class StockDataSource(ABC):
    """Abstract base class for remote stock data sources.

    A data source has exactly one job: produce the authoritative list of
    stocks a user tracks. Implementations may be slow, random or flaky; the
    tracker owns the status shown to the user and copes with all of that.
    """

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Return human-readable source name."""
        pass

    @abstractmethod
    async def fetch(self, profile: UserProfile) -> List[TrackedStock]:
        """Fetch the current stock list for a user.

        May suspend for an arbitrary time. There is no built-in timeout.

        Args:
            profile: User whose stocks to fetch (a real backend keys on profile.id)

        Returns:
            Ordered list of tracked stocks, possibly empty

        Raises:
            FetchError: if the stocks could not be fetched
        """
        pass
