from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Mapping

from .options import StoreOptions
from .store import DEFAULT_NAME, Store


class AsyncStore:
    """
    Async wrapper around Store.
    Uses asyncio.to_thread to avoid blocking the event loop on file I/O.
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    @classmethod
    async def open(
        cls,
        name: str = DEFAULT_NAME,
        options: StoreOptions | Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> "AsyncStore":
        store = await asyncio.to_thread(Store, name, options, **kwargs)
        return cls(store)

    @property
    def store(self) -> Store:
        return self._store

    @property
    def path(self) -> Path:
        return self._store.path

    async def get(self, key: str, default: Any = None) -> Any:
        return await asyncio.to_thread(self._store.get, key, default)

    async def get_or(self, key: str, default: Any) -> Any:
        return await asyncio.to_thread(self._store.get_or, key, default)

    async def has(self, key: str) -> bool:
        return await asyncio.to_thread(self._store.has, key)

    async def set(self, key: str | Mapping[str, Any], value: Any = None) -> None:
        await asyncio.to_thread(self._store.set, key, value)

    async def delete(self, key: str) -> bool:
        return await asyncio.to_thread(self._store.delete, key)

    async def clear(self) -> None:
        await asyncio.to_thread(self._store.clear)

    async def save(self, doc: Any) -> bool:
        return await asyncio.to_thread(self._store.save, doc)

    async def load(self) -> dict[str, Any]:
        return await asyncio.to_thread(self._store.load)

    async def data(self) -> dict[str, Any]:
        return await asyncio.to_thread(lambda: self._store.data)

    async def size(self) -> int:
        return await asyncio.to_thread(lambda: self._store.size)

    async def flush(self) -> bool:
        return await asyncio.to_thread(self._store.flush)

    async def close(self) -> None:
        await asyncio.to_thread(self._store.close)

    async def __aenter__(self) -> "AsyncStore":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
