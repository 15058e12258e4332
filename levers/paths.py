from __future__ import annotations

import logging
import os
import sys
import tomllib
from pathlib import Path

from .json_store import atomic_write_json
from .settings import get_settings

logger = logging.getLogger(__name__)

EXTENSION = ".json"
DEFAULT_APP_NAME = "levers"
DATA_SUBDIR = "data"


def normalize_file_name(name: str) -> str:
    """
    "app" -> "app.json", "app.json" -> "app.json", "dir/app" -> "app.json".

    Only the basename is kept and the extension is stripped once before being
    appended again, so it is never doubled.
    """
    base = os.path.basename(os.fspath(name))
    if not base:
        raise ValueError(f"store name must not be empty: {name!r}")
    if base.endswith(EXTENSION) and base != EXTENSION:
        base = base[: -len(EXTENSION)]
    return base + EXTENSION


def app_data_root() -> Path:
    """The per-user application data root for this platform."""
    settings = get_settings()
    if settings.data_home is not None:
        return settings.data_home

    home = Path.home()
    if sys.platform == "win32":
        appdata = os.getenv("APPDATA")
        return Path(appdata) if appdata else home / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return home / "Library" / "Application Support"
    xdg = os.getenv("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else home / ".config"


def default_data_dir(app_name: str | None = None) -> Path:
    name = app_name or get_settings().app_name or DEFAULT_APP_NAME
    return Path(os.path.abspath(app_data_root() / name / DATA_SUBDIR))


def detect_app_name(start: str | os.PathLike[str] | None = None) -> str | None:
    """
    Look for the nearest pyproject.toml at or above `start` (default: cwd)
    and return the project name it declares.

    Returns None when no descriptor is found or it cannot be parsed; callers
    pass the result to `app_name=` explicitly.
    """
    here = Path(start) if start is not None else Path.cwd()
    here = Path(os.path.abspath(here))
    for folder in (here, *here.parents):
        candidate = folder / "pyproject.toml"
        if not candidate.is_file():
            continue
        try:
            with candidate.open("rb") as f:
                doc = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.debug("LEVERS APP NAME: cannot read %s: %r", candidate, e)
            return None
        name = doc.get("project", {}).get("name") or doc.get("tool", {}).get("poetry", {}).get("name")
        return name if isinstance(name, str) and name else None
    return None


def resolve_path(
    name: str,
    dir: str | os.PathLike[str] | None = None,
    *,
    app_name: str | None = None,
) -> Path:
    file_name = normalize_file_name(name)
    if dir:
        return Path(os.path.abspath(os.path.expanduser(os.fspath(dir)))) / file_name
    return default_data_dir(app_name) / file_name


def ensure_exists(path: Path) -> Path:
    """Create parent directories and an empty document at `path` if no file is there yet."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        logger.debug("LEVERS INIT: creating %s", path)
        atomic_write_json(path, {})
    return path


def file_exists(
    name: str,
    dir: str | os.PathLike[str] | None = None,
    *,
    app_name: str | None = None,
) -> bool:
    return resolve_path(name, dir, app_name=app_name).is_file()
