"""Shared fixtures for stock tracker tests."""

import pytest

from stock_tracker.config import Settings
from stock_tracker.core.store import LocalStore
from stock_tracker.data.models import UserProfile
from tests.fakes import T0, FakeClock, make_stock


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        storage_path=tmp_path / "user.json",
        user_name="Tester",
        user_id="user-123",
        mock_failure_rate=0.0,
        mock_max_delay_seconds=0.0,
        datetime_format="%Y-%m-%d %H:%M",
    )


@pytest.fixture
def store(settings) -> LocalStore:
    return LocalStore(settings.storage_path)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cached_profile() -> UserProfile:
    return UserProfile(
        id="user-123",
        name="Tester",
        stocks=[make_stock("XYZ", 42.0, 43.5)],
        last_update=T0,
    )
