"""
Optional cross-process lock around populating a cache entry.

Installs are safe without any lock: extraction converges because every write
is idempotent. Taking this lock only avoids duplicate downloads when several
processes miss the cache at the same moment.

Usage:
    from protoc_fetcher.core.locking import entry_lock

    with entry_lock(entry, timeout=300):
        if not is_installed(entry):
            ...  # download and extract
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from filelock import FileLock, Timeout as LockTimeout

from protoc_fetcher.core.exceptions import EntryLockTimeout

logger = logging.getLogger(__name__)


def lock_path_for(entry: Path) -> Path:
    """
    Get the lock file used for an entry directory.

    The lock sits next to the entry, not inside it, so it never shows up in
    the installed tree.
    """
    entry = Path(entry)
    return entry.parent / f".{entry.name}.lock"


@contextmanager
def entry_lock(entry: Path, timeout: float = 300.0) -> Iterator[None]:
    """
    Hold an exclusive lock for populating ``entry``.

    Args:
        entry: Cache entry directory
        timeout: Maximum wait in seconds (default: 300 for slow downloads)

    Yields:
        None

    Raises:
        EntryLockTimeout: If the lock can't be acquired within timeout
    """
    lock_file = lock_path_for(entry)
    lock_file.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(lock_file, timeout=timeout)

    try:
        lock.acquire()
    except LockTimeout as e:
        logger.error(
            f"Could not acquire install lock for {entry} after {timeout}s. "
            "Another process may be downloading this release."
        )
        raise EntryLockTimeout(entry, timeout) from e

    logger.debug(f"Acquired install lock: {lock_file}")
    try:
        yield
    finally:
        lock.release()
        logger.debug(f"Released install lock: {lock_file}")


__all__ = ["entry_lock", "lock_path_for"]
