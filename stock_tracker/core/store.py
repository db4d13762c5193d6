"""JSON file cache for the user profile."""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from stock_tracker.core.exceptions import StorageError
from stock_tracker.data.models import UserProfile

logger = logging.getLogger(__name__)


class LocalStore:
    """Single-record store: one JSON file holding the whole profile.

    Reads and writes are whole-object. ``load`` and ``save`` never raise for
    I/O or format problems; a missing or corrupt cache reads as absent and a
    failed write is reported with ``False``.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path).expanduser()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[UserProfile]:
        """Read the cached profile.

        Returns:
            The profile, or None when nothing usable is cached
        """
        try:
            profile = self._read()
        except StorageError as e:
            logger.warning(f"Failed to load user from local storage: {e}")
            return None

        logger.debug(f"Loaded {profile.name} with {len(profile.stocks)} stock(s) from {self._path}")
        return profile

    def save(self, profile: UserProfile) -> bool:
        """Overwrite the cache with ``profile``.

        Returns:
            True if the profile was written
        """
        try:
            self._write(profile.to_json())
        except StorageError as e:
            logger.error(f"Failed to save user to local storage: {e}")
            return False

        logger.debug(f"Saved {len(profile.stocks)} stock(s) to {self._path}")
        return True

    def clear(self) -> bool:
        """Delete the cached profile.

        Returns:
            True if a cached profile was removed
        """
        with self._lock:
            try:
                self._path.unlink()
            except FileNotFoundError:
                return False
            except OSError as e:
                logger.error(f"Failed to clear local storage: {e}")
                return False
        logger.info(f"Cleared local storage at {self._path}")
        return True

    def _read(self) -> UserProfile:
        try:
            data = self._path.read_bytes()
        except FileNotFoundError:
            raise StorageError(f"no cache at {self._path}")
        except OSError as e:
            raise StorageError(f"could not read {self._path}: {e}")

        try:
            return UserProfile.from_json(data)
        except ValidationError as e:
            raise StorageError(f"malformed cache at {self._path}: {e.error_count()} error(s)")

    def _write(self, payload: str) -> None:
        # Write to a sibling temp file, then rename over the target, so a
        # reader never sees a half-written record.
        with self._lock:
            tmp_name = None
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
                )
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self._path)
            except OSError as e:
                if tmp_name is not None and os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise StorageError(f"could not write {self._path}: {e}")
