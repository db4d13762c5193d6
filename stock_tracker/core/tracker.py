"""Stock tracker - owns the user profile and refreshes it from a data source."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Set

from pydantic import ValidationError

from stock_tracker.config import Settings, get_settings
from stock_tracker.core.exceptions import FetchError
from stock_tracker.core.status import Failed, FetchStatus, Idle, Succeeded, Waiting
from stock_tracker.core.store import LocalStore
from stock_tracker.data.models import TrackedStock, UserProfile
from stock_tracker.data.sources.base import StockDataSource

logger = logging.getLogger(__name__)

NEVER_UPDATED = "never"

Observer = Callable[["StockTracker"], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StockTracker:
    """Refresh coordinator for one user's tracked stocks.

    The tracker is the only writer of the profile and the fetch status. The
    display layer reads ``stocks``, ``status`` and ``last_update_display``,
    subscribes to changes and calls ``refresh()``.

    Every refresh is tagged with an increasing generation number. Only the
    most recently issued fetch may apply its outcome; anything that resolves
    after being superseded is dropped, so a slow old fetch can never overwrite
    a newer result.

    All methods must be called from the thread running the event loop.
    """

    def __init__(
        self,
        data_source: StockDataSource,
        store: LocalStore,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the tracker and seed it from the local cache.

        Args:
            data_source: Where fresh stocks come from
            store: Local cache, read now and written after each successful refresh
            settings: App settings (defaults to global settings)
            clock: Returns the current time (timezone-aware)
        """
        self.settings = settings or get_settings()
        self.data_source = data_source
        self.store = store
        self._clock = clock or _utcnow

        self._status: FetchStatus = Idle()
        self._generation = 0
        self._tasks: Set[asyncio.Task] = set()
        self._observers: List[Observer] = []

        profile = store.load()
        if profile is None:
            logger.info("Starting with a fresh profile")
            profile = UserProfile.default(
                name=self.settings.user_name,
                user_id=self.settings.user_id,
            )
        self._profile = profile

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def profile(self) -> UserProfile:
        return self._profile

    @property
    def stocks(self) -> List[TrackedStock]:
        return list(self._profile.stocks)

    @property
    def status(self) -> FetchStatus:
        return self._status

    @property
    def last_update_display(self) -> str:
        """When the stocks were last refreshed, or "never"."""
        if self._profile.last_update is None:
            return NEVER_UPDATED
        return self.format_timestamp(self._profile.last_update)

    @property
    def pending(self) -> int:
        """Number of fetches still running, superseded ones included."""
        return len(self._tasks)

    def format_timestamp(self, value: datetime) -> str:
        """Format a timestamp as a short local date and time."""
        return value.astimezone().strftime(self.settings.datetime_format)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Call ``observer(tracker)`` after every status or profile change.

        Returns:
            Function that removes the observer
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        for observer in list(self._observers):
            try:
                observer(self)
            except Exception as e:
                logger.error(f"Observer {observer!r} failed: {e}")

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    def refresh(self) -> "asyncio.Task[None]":
        """Start a refresh.

        The status switches to Waiting before this returns. The fetch runs
        in a task; await the returned task to know when the refresh is done.
        Outcomes are read from ``status`` and ``stocks`` afterwards.

        Calling again while a fetch is in flight starts a new fetch and the
        earlier one's outcome is discarded. Nothing is cancelled.

        Raises:
            RuntimeError: if no event loop is running
        """
        loop = asyncio.get_running_loop()

        self._generation += 1
        generation = self._generation
        since = self._clock()
        self._status = Waiting(since=since)
        self._notify()

        task = loop.create_task(self._fetch(generation, since, self._profile))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def join(self) -> None:
        """Wait until every started fetch, superseded ones included, has resolved."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _fetch(self, generation: int, since: datetime, profile: UserProfile) -> None:
        source = self.data_source.display_name
        logger.info(f"Refresh #{generation}: fetching stocks from {source}")

        try:
            stocks = await self.data_source.fetch(profile)
        except FetchError as e:
            self._fail(generation, e.message)
            return
        except Exception as e:
            if self._is_current(generation):
                logger.exception(f"Refresh #{generation}: unexpected error from {source}")
            self._fail(generation, str(e) or type(e).__name__)
            return

        self._succeed(generation, since, stocks)

    def _succeed(self, generation: int, since: datetime, stocks: List[TrackedStock]) -> None:
        if not self._is_current(generation):
            logger.debug(f"Refresh #{generation}: discarding stale result")
            return

        completed_at = self._clock()
        try:
            profile = self._profile.with_stocks(stocks, completed_at)
        except ValidationError as e:
            logger.error(f"Refresh #{generation}: invalid stock data: {e}")
            self._status = Failed(message="Received invalid stock data")
            self._notify()
            return

        self._profile = profile
        self._status = Succeeded(
            elapsed=completed_at - since,
            symbols=tuple(stock.symbol for stock in profile.stocks),
        )
        logger.info(
            f"Refresh #{generation}: got {len(profile.stocks)} stock(s) "
            f"in {self._status.elapsed.total_seconds():.1f}s"
        )
        self._notify()

        try:
            saved = self.store.save(profile)
        except Exception as e:
            logger.error(f"Refresh #{generation}: saving to local storage failed: {e}")
            saved = False
        if not saved:
            logger.warning("Continuing with in-memory stocks only")

    def _fail(self, generation: int, message: str) -> None:
        if not self._is_current(generation):
            logger.debug(f"Refresh #{generation}: discarding stale failure ({message})")
            return

        logger.warning(f"Refresh #{generation}: {message}")
        self._status = Failed(message=message)
        self._notify()
