"""
Reader/writer lock for the volume registry.
Pure reads share the lock; every mutation (including the external
mount/unmount call and the snapshot write) holds it exclusively.
"""

import threading
import time
from contextlib import contextmanager
from typing import Optional

from sshfs_volume.exceptions import LockTimeoutException
from sshfs_volume.utils.logger import get_logger

LOG = get_logger(__name__)


class ReadWriteLock:
    """
    Coarse-grained reader/writer lock over the whole registry.

    Writers are preferred: once a writer is waiting, new readers block
    until it has run, so a stream of reads cannot starve mount/unmount.
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize the lock.

        Args:
            timeout: Maximum time to wait for acquisition in seconds
                     (None or 0 waits forever)
        """
        self.timeout = timeout or None
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def _deadline(self) -> Optional[float]:
        if self.timeout is None:
            return None
        return time.monotonic() + self.timeout

    def _wait(self, deadline: Optional[float], operation: str):
        if deadline is None:
            self._cond.wait()
            return
        remaining = deadline - time.monotonic()
        if remaining <= 0 or not self._cond.wait(remaining):
            if time.monotonic() >= deadline:
                raise LockTimeoutException(
                    f"Could not acquire registry lock for {operation} "
                    f"after {self.timeout} seconds",
                    operation=operation
                )

    @contextmanager
    def acquire_read(self, operation: str = 'read'):
        """
        Context manager holding the lock in shared mode.

        Raises:
            LockTimeoutException: If the lock cannot be acquired in time
        """
        deadline = self._deadline()
        with self._cond:
            while self._writer or self._writers_waiting:
                self._wait(deadline, operation)
            self._readers += 1

        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def acquire_write(self, operation: str = 'write'):
        """
        Context manager holding the lock in exclusive mode.

        Raises:
            LockTimeoutException: If the lock cannot be acquired in time
        """
        deadline = self._deadline()
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._wait(deadline, operation)
            except LockTimeoutException:
                self._cond.notify_all()
                raise
            finally:
                self._writers_waiting -= 1
            self._writer = True

        LOG.debug(f"Acquired registry lock for {operation}")
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()
            LOG.debug(f"Released registry lock for {operation}")
