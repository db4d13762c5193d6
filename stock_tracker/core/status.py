"""Fetch status reported by the tracker."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Tuple, Union


@dataclass(frozen=True)
class Idle:
    """No fetch has been started this session."""


@dataclass(frozen=True)
class Waiting:
    """A fetch is in flight since ``since``."""

    since: datetime


@dataclass(frozen=True)
class Succeeded:
    """The latest fetch returned ``symbols`` after ``elapsed``."""

    elapsed: timedelta
    symbols: Tuple[str, ...]


@dataclass(frozen=True)
class Failed:
    """The latest fetch failed with ``message``."""

    message: str


FetchStatus = Union[Idle, Waiting, Succeeded, Failed]
