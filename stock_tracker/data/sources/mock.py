"""Mock data source generating random stocks after a random delay."""

from __future__ import annotations

import asyncio
import logging
import random
import string
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

from stock_tracker.core.exceptions import FetchError
from stock_tracker.data.models import PricePoint, TrackedStock, UserProfile
from stock_tracker.data.sources.base import StockDataSource

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to get stocks"

# Shape of generated data
MIN_STOCKS = 1
MAX_STOCKS = 10
MAX_SYMBOL_LENGTH = 4
MIN_PRICE = 1.0
MAX_PRICE = 500.0


class MockStockDataSource(StockDataSource):
    """Unreliable stand-in for a real backend.

    Fails outright on a fraction of calls; otherwise answers with a random
    list of stocks after a random delay.
    """

    def __init__(
        self,
        failure_rate: float = 1 / 3,
        max_delay_seconds: float = 10.0,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize mock source.

        Args:
            failure_rate: Probability (0-1) that a call fails
            max_delay_seconds: Upper bound of the random response delay
            rng: Random generator (seed one for reproducible runs)
            sleep: Coroutine used to wait out the delay
        """
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError(f"failure_rate must be between 0 and 1, got {failure_rate}")
        if max_delay_seconds < 0:
            raise ValueError(f"max_delay_seconds must not be negative, got {max_delay_seconds}")
        self.failure_rate = failure_rate
        self.max_delay_seconds = max_delay_seconds
        self.rng = rng or random.Random()
        self._sleep = sleep

    @property
    def display_name(self) -> str:
        return "Mock"

    async def fetch(self, profile: UserProfile) -> List[TrackedStock]:
        """Return random stocks, or fail at random. The profile is ignored."""
        if self.rng.random() < self.failure_rate:
            logger.debug("Mock source failing on purpose")
            raise FetchError(FAILURE_MESSAGE)

        delay = self.rng.uniform(0.0, self.max_delay_seconds)
        logger.debug(f"Mock source answering in {delay:.1f}s")
        await self._sleep(delay)
        return self._random_stocks()

    def _random_stocks(self) -> List[TrackedStock]:
        """Generate 1-10 stocks with distinct symbols and a single price each."""
        count = self.rng.randint(MIN_STOCKS, MAX_STOCKS)
        symbols: List[str] = []
        while len(symbols) < count:
            symbol = self._random_symbol()
            if symbol not in symbols:
                symbols.append(symbol)

        now = datetime.now(timezone.utc)
        return [
            TrackedStock(
                symbol=symbol,
                history=[PricePoint(time=now, amount=self.rng.uniform(MIN_PRICE, MAX_PRICE))],
            )
            for symbol in symbols
        ]

    def _random_symbol(self) -> str:
        length = self.rng.randint(1, MAX_SYMBOL_LENGTH)
        return "".join(self.rng.choice(string.ascii_uppercase) for _ in range(length))
