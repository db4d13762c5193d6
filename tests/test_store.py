"""Tests for the local profile store."""

import json
import threading
from unittest.mock import patch

from stock_tracker.core.store import LocalStore
from stock_tracker.data.models import UserProfile
from tests.fakes import make_stock


class TestLocalStore:
    """Tests for LocalStore."""

    def test_load_returns_none_when_missing(self, store):
        """First run has nothing cached."""
        assert store.load() is None

    def test_save_then_load_round_trip(self, store, cached_profile):
        """Saved profile loads back deep-equal, history and timestamps included."""
        assert store.save(cached_profile) is True

        loaded = store.load()

        assert loaded is not None
        assert loaded.model_dump() == cached_profile.model_dump()
        assert loaded.stocks[0].history[1].amount == 43.5
        assert loaded.last_update == cached_profile.last_update

    def test_save_overwrites_previous_record(self, store, cached_profile):
        """Only the latest profile is kept."""
        store.save(cached_profile)
        newer = cached_profile.with_stocks([make_stock("NEW", 1.0)], cached_profile.last_update)
        store.save(newer)

        assert [s.symbol for s in store.load().stocks] == ["NEW"]

    def test_load_returns_none_for_malformed_json(self, store):
        """Corrupt cache reads as absent, no exception escapes."""
        store.path.write_text("{not json")
        assert store.load() is None

    def test_load_returns_none_for_wrong_shape(self, store):
        """Valid JSON that is not a profile reads as absent."""
        store.path.write_text(json.dumps([1, 2, 3]))
        assert store.load() is None

    def test_load_returns_none_for_empty_file(self, store):
        store.path.write_text("")
        assert store.load() is None

    def test_load_returns_none_for_invalid_utf8(self, store):
        """Bytes that are not UTF-8 read as absent."""
        store.path.write_bytes(b"\xff\xfe\x00garbage\x80")
        assert store.load() is None

    def test_save_creates_parent_directory(self, tmp_path, cached_profile):
        """Cache directory is created on first save."""
        store = LocalStore(tmp_path / "nested" / "dir" / "user.json")
        assert store.save(cached_profile) is True
        assert store.path.exists()

    def test_save_reports_failure(self, tmp_path, cached_profile):
        """Write errors are reported, not raised."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = LocalStore(blocker / "user.json")

        assert store.save(cached_profile) is False
        assert store.load() is None

    def test_failed_write_keeps_previous_record(self, store, cached_profile):
        """A failed save leaves the last good record in place and no temp files."""
        store.save(cached_profile)
        newer = cached_profile.with_stocks([make_stock("NEW", 1.0)], cached_profile.last_update)

        with patch("stock_tracker.core.store.os.replace", side_effect=OSError("disk full")):
            assert store.save(newer) is False

        assert [s.symbol for s in store.load().stocks] == ["XYZ"]
        assert [p.name for p in store.path.parent.iterdir()] == ["user.json"]

    def test_concurrent_saves_leave_a_complete_record(self, store):
        """Saves from several threads never interleave."""
        profiles = [
            UserProfile(name="Tester", stocks=[make_stock(f"S{i}", float(i)) for i in range(1, n + 1)])
            for n in range(1, 9)
        ]
        threads = [threading.Thread(target=store.save, args=(p,)) for p in profiles]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        loaded = store.load()
        assert loaded is not None
        assert loaded.model_dump() in [p.model_dump() for p in profiles]

    def test_clear_removes_record(self, store, cached_profile):
        store.save(cached_profile)
        assert store.clear() is True
        assert store.load() is None
        assert store.clear() is False

    def test_expands_user_home(self):
        """Paths with ~ point into the home directory."""
        store = LocalStore("~/user.json")
        assert "~" not in str(store.path)
