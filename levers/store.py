from __future__ import annotations

import copy
import logging
import os
import threading
from pathlib import Path
from typing import Any, Iterator, Mapping

from . import dot_path
from .debounce import Clock, TimerFactory, WriteCoalescer, thread_timer
from .disk_store import DiskJsonDocumentStore
from .interfaces import KeyValueDocumentStore
from .json_store import encode_json
from .options import StoreOptions
from .paths import ensure_exists, file_exists, resolve_path

logger = logging.getLogger(__name__)

DEFAULT_NAME = ".settings"


class Store:
    """
    A JSON settings file with dot-path access.

    The handle keeps an in-memory snapshot of the document and works on it
    exclusively; the file is read at construction and on explicit `load()`.
    Changes made to the file by other handles or processes are not seen until
    then, and concurrent writers race (last write wins).

    Every mutation persists the whole snapshot. With `debounce` enabled, a
    write arriving within `sync_threshold` seconds of the previous one is
    deferred by `write_delay` seconds and coalesced with whatever follows, so
    a burst of writes ends in one file write of the final state. Call
    `flush()` (or use the store as a context manager) to force it out.

        settings = Store("app", dir="~/.myapp", defaults={"ui": {"theme": "light"}})
        settings.set("ui.theme", "dark")
        settings.get("ui.theme")           # "dark"
        settings.set({"dev": True, "ui.zoom": 1.5})
    """

    def __init__(
        self,
        name: str = DEFAULT_NAME,
        options: StoreOptions | Mapping[str, Any] | None = None,
        *,
        clock: Clock | None = None,
        timer_factory: TimerFactory | None = None,
        **kwargs: Any,
    ) -> None:
        self._options = StoreOptions.build(options, **kwargs)
        self._path = resolve_path(name, self._options.dir, app_name=self._options.app_name)
        self._lock = threading.RLock()
        self._disk: KeyValueDocumentStore = DiskJsonDocumentStore(self._path, indent=self._options.indent)

        coalescer_kwargs: dict[str, Any] = {}
        if clock is not None:
            coalescer_kwargs["clock"] = clock
        self._writes = WriteCoalescer(
            self._write_snapshot,
            sync_threshold=self._options.sync_threshold,
            write_delay=self._options.write_delay,
            timer_factory=timer_factory or thread_timer,
            lock=self._lock,
            **coalescer_kwargs,
        )

        ensure_exists(self._path)
        loaded = self._disk.load()
        data: dict[str, Any] = copy.deepcopy(self._options.defaults)
        data.update(loaded)
        self._data = data
        if data != loaded:
            self._disk.save(self._data)
        self._writes.mark_synced()
        logger.debug("LEVERS OPEN: %s (%d keys)", self._path, len(self._data))

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name: str = DEFAULT_NAME,
        options: StoreOptions | Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> "Store":
        return cls(name, options, **kwargs)

    @staticmethod
    def resolve(name: str, dir: str | os.PathLike[str] | None = None, *, app_name: str | None = None) -> Path:
        return resolve_path(name, dir, app_name=app_name)

    @staticmethod
    def exists(name: str, dir: str | os.PathLike[str] | None = None, *, app_name: str | None = None) -> bool:
        return file_exists(name, dir, app_name=app_name)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    @property
    def path(self) -> Path:
        return self._path

    @property
    def options(self) -> StoreOptions:
        return self._options

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return dot_path.get(self._data, key, default)

    def get_or(self, key: str, default: Any) -> Any:
        """Like get(), but a stored None also yields `default`."""
        value = self.get(key)
        return default if value is None else value

    def has(self, key: str) -> bool:
        with self._lock:
            return dot_path.has(self._data, key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    @property
    def data(self) -> dict[str, Any]:
        """A copy of the whole document. Editing it does not change the store; use save()."""
        with self._lock:
            return copy.deepcopy(self._data)

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._data)

    def __len__(self) -> int:
        return self.size

    def items(self) -> list[tuple[str, Any]]:
        return list(self)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        with self._lock:
            snapshot = copy.deepcopy(self._data)
        for key, value in snapshot.items():
            yield key, value

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def set(self, key: str | Mapping[str, Any], value: Any = None) -> None:
        # The store keeps its own copies; later edits to `value` by the caller do not leak in.
        if dot_path.is_document(key):
            key = copy.deepcopy(dict(key))
        value = copy.deepcopy(value)
        with self._lock:
            candidate = copy.deepcopy(self._data)
            dot_path.set(candidate, key, value)
            self._commit(candidate)

    def delete(self, key: str) -> bool:
        with self._lock:
            candidate = copy.deepcopy(self._data)
            removed = dot_path.delete(candidate, key)
            self._commit(candidate)
            return removed

    def clear(self) -> None:
        with self._lock:
            self._commit({})

    def save(self, doc: Any) -> bool:
        """
        Replace the whole document.

        Anything that is not a mapping (list, None, scalar) is ignored and
        False is returned.
        """
        if not dot_path.is_document(doc):
            logger.debug("LEVERS SAVE: ignoring non-object document of type %s", type(doc).__name__)
            return False
        candidate = copy.deepcopy(dict(doc))
        with self._lock:
            self._commit(candidate)
        return True

    def load(self) -> dict[str, Any]:
        """Re-read the file into the snapshot, after flushing any pending write, and return a copy."""
        with self._lock:
            self._writes.flush()
            self._data = self._disk.load()
            self._writes.mark_synced()
            return copy.deepcopy(self._data)

    # ------------------------------------------------------------------
    # Write discipline
    # ------------------------------------------------------------------
    @property
    def pending(self) -> bool:
        """True while a deferred write is scheduled."""
        return self._writes.pending

    def flush(self) -> bool:
        """Persist a pending deferred write now. Returns True if anything was written."""
        return self._writes.flush()

    def close(self) -> None:
        self.flush()

    def __enter__(self) -> "Store":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _commit(self, candidate: dict[str, Any]) -> None:
        """
        Make `candidate` the snapshot and persist it.

        A document that cannot be encoded as JSON raises before the snapshot
        changes. If a synchronous write fails the previous snapshot is put back.
        """
        encode_json(candidate)
        previous = self._data
        self._data = candidate
        try:
            self._persist()
        except OSError:
            self._data = previous
            raise

    def _persist(self) -> None:
        if self._options.debounce:
            self._writes.request()
        else:
            self._write_snapshot()
            self._writes.mark_synced()

    def _write_snapshot(self) -> None:
        with self._lock:
            self._disk.save(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={str(self._path)!r}, size={self.size})"


def open(
    name: str = DEFAULT_NAME,
    options: StoreOptions | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> Store:
    """Open (creating if needed) the store called `name`."""
    return Store(name, options, **kwargs)
