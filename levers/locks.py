from __future__ import annotations

import os
import threading
from pathlib import Path


class PathLockRegistry:
    """
    Hands out one re-entrant lock per absolute file path, so that several
    store handles bound to the same file in this process never interleave
    their reads and writes. Nothing here coordinates with other processes.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def lock_for(self, path: Path) -> threading.RLock:
        key = os.path.normcase(os.path.abspath(path))
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


GLOBAL_PATH_LOCKS = PathLockRegistry()
