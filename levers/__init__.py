from __future__ import annotations

from .async_store import AsyncStore
from .errors import InvalidDotPathError, LeversError
from .options import StoreOptions
from .paths import detect_app_name, file_exists, resolve_path
from .settings import Settings, get_settings
from .store import DEFAULT_NAME, Store, open

__all__ = [
    "AsyncStore",
    "DEFAULT_NAME",
    "InvalidDotPathError",
    "LeversError",
    "Settings",
    "Store",
    "StoreOptions",
    "detect_app_name",
    "file_exists",
    "get_settings",
    "open",
    "resolve_path",
]
