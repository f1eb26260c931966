"""Per-site locking for remap operations.

The remap pipeline itself does no locking; callers hold one of these locks
for the whole remap so two remaps never run against the same site.
"""
import fcntl
import os
import re
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from siteremap.core.logger import get_logger

logger = get_logger(__name__)

DEFAULT_LOCK_DIR = Path.home() / ".siteremap" / "locks"


class LockError(Exception):
    """Raised when unable to acquire lock."""
    pass


def lock_path_for(site_id: str, lock_dir: Optional[Path] = None) -> Path:
    """Return the lock file used for a site."""
    safe_id = re.sub(r"[^A-Za-z0-9_.-]", "_", site_id)
    return Path(lock_dir or DEFAULT_LOCK_DIR) / f"{safe_id}.lock"


class SiteLock:
    """File-based lock preventing concurrent remaps of one site."""

    def __init__(self, site_id: str, lock_dir: Optional[Path] = None, timeout: int = 0):
        """Initialize lock.

        Args:
            site_id: Site the lock protects
            lock_dir: Directory holding lock files (default: ~/.siteremap/locks)
            timeout: Seconds to wait for lock (0 = fail immediately)
        """
        self.site_id = site_id
        self.lock_file = lock_path_for(site_id, lock_dir)
        self.timeout = timeout
        self.lock_fd = None

    def acquire(self) -> bool:
        """Acquire the lock.

        Returns:
            True if lock acquired successfully

        Raises:
            LockError: If unable to acquire lock
        """
        self.lock_file.parent.mkdir(parents=True, exist_ok=True)

        # Append mode keeps the holder's info readable until we own the lock
        self.lock_fd = open(self.lock_file, 'a+')

        start_time = time.time()
        while True:
            try:
                fcntl.flock(self.lock_fd.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)

                self.lock_fd.seek(0)
                self.lock_fd.truncate()
                self.lock_fd.write(f"{os.getpid()}\n")
                self.lock_fd.write(f"{time.strftime('%Y-%m-%d %H:%M:%S')}\n")
                self.lock_fd.flush()

                logger.debug(f"Acquired lock: {self.lock_file}")
                return True

            except OSError:
                if self.timeout == 0 or time.time() - start_time >= self.timeout:
                    lock_info = self._read_lock_info()
                    self.lock_fd.close()
                    self.lock_fd = None
                    raise LockError(
                        f"A remap of site '{self.site_id}' is already in progress.\n"
                        f"Lock held by PID {lock_info['pid']} since {lock_info['time']}\n"
                        f"Wait for it to complete, or remove {self.lock_file} if stale."
                    )

                time.sleep(0.5)

    def release(self):
        """Release the lock."""
        if self.lock_fd is None:
            return

        try:
            fcntl.flock(self.lock_fd.fileno(), fcntl.LOCK_UN)
            self.lock_fd.close()
            logger.debug(f"Released lock: {self.lock_file}")
        except OSError as e:
            logger.warning(f"Error releasing lock: {e}")
        finally:
            self.lock_fd = None

        try:
            if self.lock_file.exists():
                self.lock_file.unlink()
        except OSError as e:
            logger.warning(f"Error removing lock file: {e}")

    def _read_lock_info(self) -> dict:
        """Read info from lock file about who holds it."""
        try:
            with open(self.lock_file) as f:
                lines = f.readlines()
                if len(lines) >= 2:
                    return {
                        'pid': lines[0].strip(),
                        'time': lines[1].strip()
                    }
        except OSError:
            pass

        return {'pid': 'unknown', 'time': 'unknown'}

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False


@contextmanager
def site_lock(site_id: str, timeout: int = 0, lock_dir: Optional[Path] = None):
    """Context manager holding the remap lock of one site.

    Usage:
        with site_lock("blog"):
            orchestrator.remap(...)

    Raises:
        LockError: If unable to acquire lock
    """
    lock = SiteLock(site_id, lock_dir=lock_dir, timeout=timeout)
    lock.acquire()
    try:
        yield lock
    finally:
        lock.release()
