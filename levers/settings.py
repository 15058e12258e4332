from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_millis(name: str, default_ms: int) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default_ms / 1000.0
    return float(raw) / 1000.0


def _env_str(name: str) -> str | None:
    raw = (os.getenv(name) or "").strip()
    return raw or None


@dataclass(frozen=True)
class Settings:
    # Default location
    app_name: str | None
    data_home: Path | None

    # Write discipline (seconds)
    debounce: bool
    sync_threshold: float
    write_delay: float

    # File format; None writes compact JSON
    indent: int | None


def get_settings(env_file: str | os.PathLike[str] | None = None) -> Settings:
    if env_file is not None:
        load_dotenv(env_file)

    app_name = _env_str("LEVERS_APP_NAME")

    data_home_raw = _env_str("LEVERS_DATA_HOME")
    data_home = Path(data_home_raw).expanduser() if data_home_raw else None

    debounce = _env_bool("LEVERS_DEBOUNCE", True)
    sync_threshold = _env_millis("LEVERS_SYNC_THRESHOLD_MS", 250)
    write_delay = _env_millis("LEVERS_WRITE_DELAY_MS", 275)

    indent_raw = _env_str("LEVERS_INDENT")
    if indent_raw is None:
        indent: int | None = 2
    elif indent_raw.lower() in ("none", "compact"):
        indent = None
    else:
        indent = int(indent_raw)

    return Settings(
        app_name=app_name,
        data_home=data_home,
        debounce=debounce,
        sync_threshold=sync_threshold,
        write_delay=write_delay,
        indent=indent,
    )
