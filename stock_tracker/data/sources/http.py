"""Data source backed by the stock tracker REST API."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import requests
from pydantic import TypeAdapter, ValidationError

from stock_tracker.core.exceptions import FetchError
from stock_tracker.data.models import TrackedStock, UserProfile
from stock_tracker.data.sources.base import StockDataSource

logger = logging.getLogger(__name__)

# Default timeout for API calls (seconds)
API_TIMEOUT = 30

_stock_list = TypeAdapter(List[TrackedStock])


class HttpStockDataSource(StockDataSource):
    """Fetches a user's stocks from ``GET {base_url}/users/{id}/stocks``.

    The user id is issued by the backend; a profile without one cannot be
    fetched. The payload is a JSON list of stocks in the same shape as the
    local cache.
    """

    STOCKS_PATH = "/users/{user_id}/stocks"

    def __init__(
        self,
        base_url: str,
        timeout: int = API_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """Initialize HTTP source.

        Args:
            base_url: API root, e.g. "https://api.example.com"
            timeout: Timeout for each request in seconds
            session: Optional requests session. Without one each fetch makes its
                own request, so overlapping fetches share no connection state.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session

    @property
    def display_name(self) -> str:
        return f"API ({self.base_url})"

    async def fetch(self, profile: UserProfile) -> List[TrackedStock]:
        """Fetch stocks without blocking the event loop."""
        if not profile.id:
            raise FetchError("User is not registered with the server")
        return await asyncio.to_thread(self._fetch_sync, profile.id)

    def _fetch_sync(self, user_id: str) -> List[TrackedStock]:
        url = self.base_url + self.STOCKS_PATH.format(user_id=user_id)

        try:
            get = self.session.get if self.session is not None else requests.get
            response = get(url, timeout=self.timeout)
        except requests.Timeout:
            logger.warning(f"Timeout after {self.timeout}s fetching {url}")
            raise FetchError(f"Request timed out after {self.timeout} seconds")
        except requests.RequestException as e:
            logger.warning(f"Request to {url} failed: {e}")
            raise FetchError("Could not reach the server")

        if response.status_code == 404:
            raise FetchError("User not found on the server")
        if response.status_code >= 500:
            logger.warning(f"Server error from {url}: {response.status_code}")
            raise FetchError(f"Server error ({response.status_code})")
        if not 200 <= response.status_code < 300:
            logger.error(f"API error: {response.status_code} - {response.text}")
            raise FetchError(f"Request failed ({response.status_code})")

        try:
            return _stock_list.validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Malformed stock payload from {url}: {e}")
            raise FetchError("Server returned malformed data")
