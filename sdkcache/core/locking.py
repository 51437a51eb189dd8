"""
Concurrent access control for the version cache.

Mutating cache operations (fetch adoption, removal, promotion, global
pointer changes) run under an advisory cross-process file lock so that two
command-line invocations against the same cache root cannot interleave.
Read operations are not locked.

Usage:
    from sdkcache.core.locking import CacheLock

    lock = CacheLock(config.lock_path, timeout=30)
    with lock:
        # Safely modify the cache root
        pass
"""

import logging
from pathlib import Path

from filelock import FileLock, Timeout

from sdkcache.core.exceptions import CacheLockTimeout

logger = logging.getLogger(__name__)


class CacheLock:
    """
    Re-entrant advisory lock around a cache root.

    Uses the `filelock` library for cross-platform, cross-process locking.
    Nested use within one process (e.g. materialize() calling remove())
    only acquires the underlying file lock once.

    Attributes:
        lock_path: Path of the lock file
        timeout: Seconds to wait before giving up
    """

    def __init__(self, lock_path: Path, timeout: float = 30):
        self.lock_path = Path(lock_path)
        self.timeout = timeout
        self._lock = FileLock(str(self.lock_path), timeout=timeout)

    @property
    def is_locked(self) -> bool:
        return self._lock.is_locked

    def acquire(self):
        """
        Acquire the cache lock.

        Raises:
            CacheLockTimeout: If lock cannot be acquired within timeout
        """
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            self._lock.acquire()
        except Timeout as e:
            logger.error(
                f"Could not acquire cache lock after {self.timeout}s. "
                "Another sdkcache process may be running."
            )
            raise CacheLockTimeout(
                f"Could not acquire cache lock {self.lock_path} after "
                f"{self.timeout}s. Another sdkcache process may be running."
            ) from e
        logger.debug(f"Acquired cache lock: {self.lock_path}")

    def release(self):
        self._lock.release()
        if not self._lock.is_locked:
            logger.debug(f"Released cache lock: {self.lock_path}")

    def __enter__(self) -> "CacheLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.release()


__all__ = ["CacheLock", "CacheLockTimeout"]
