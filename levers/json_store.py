from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def read_json(path: Path) -> Any | None:
    """
    Read JSON from disk.

    Returns None for missing files, empty files, undecodable bytes or invalid
    JSON. Any other OSError (permissions, path is a directory, ...) propagates.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as e:
        logger.warning("LEVERS READ: %s is not valid UTF-8, ignoring content: %r", path, e)
        return None
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("LEVERS READ: %s is not valid JSON, ignoring content: %r", path, e)
        return None


def encode_json(payload: Any, *, indent: int | None = 2, sort_keys: bool = False) -> str:
    """Encode `payload` the way it is written to disk; raises TypeError/ValueError for non-JSON values."""
    return json.dumps(payload, indent=indent, sort_keys=sort_keys, ensure_ascii=False)


def atomic_write_json(path: Path, payload: Any, *, indent: int | None = 2, sort_keys: bool = False) -> None:
    """
    Atomically write JSON to disk by writing to a temp file then replacing.

    The payload is encoded before anything touches the filesystem, so an
    unserializable value leaves the existing file as it was.
    """
    text = encode_json(payload, indent=indent, sort_keys=sort_keys)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f"{path.name}.{os.getpid()}.tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as f:
            f.write(text)
            f.write("\n")
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
