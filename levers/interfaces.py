from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol


class KeyValueDocumentStore(Protocol):
    """
    A single JSON object persisted somewhere; the store handle only ever
    loads or saves it whole.
    """

    @property
    def path(self) -> Path:
        ...

    def load(self) -> dict[str, Any]:
        """Load and return the full document (never None, {} when missing or malformed)."""
        ...

    def save(self, doc: dict[str, Any]) -> None:
        """Persist the full document atomically."""
        ...
