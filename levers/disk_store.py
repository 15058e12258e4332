from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .dot_path import is_document
from .interfaces import KeyValueDocumentStore
from .json_store import atomic_write_json, read_json
from .locks import GLOBAL_PATH_LOCKS

logger = logging.getLogger(__name__)


class DiskJsonDocumentStore(KeyValueDocumentStore):
    """
    Stores a single JSON document on disk at a fixed path.

    - Always returns a dict (empty dict on missing/invalid JSON or a top-level
      value that is not an object).
    - Writes atomically.
    """

    def __init__(self, path: Path, *, indent: int | None = 2):
        self._path = path
        self._indent = indent

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        lock = GLOBAL_PATH_LOCKS.lock_for(self._path)
        with lock:
            raw = read_json(self._path)
        if raw is None:
            return {}
        if not is_document(raw):
            logger.warning(
                "LEVERS LOAD: %s holds a JSON %s, not an object; starting empty",
                self._path,
                type(raw).__name__,
            )
            return {}
        return dict(raw)

    def save(self, doc: dict[str, Any]) -> None:
        lock = GLOBAL_PATH_LOCKS.lock_for(self._path)
        with lock:
            atomic_write_json(self._path, doc, indent=self._indent)
        logger.debug("LEVERS SAVE: wrote %d keys to %s", len(doc), self._path)
