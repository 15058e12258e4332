from __future__ import annotations

from typing import Any, Mapping

from .errors import InvalidDotPathError

SEPARATOR = "."
ESCAPE = "\\"


def is_document(value: Any) -> bool:
    """True for plain key/value maps; lists, None and scalars are not documents."""
    return isinstance(value, Mapping)


def split_path(path: str) -> list[str]:
    """
    Split a dot-path into its segments.

    "a.b.c" -> ["a", "b", "c"]
    "a\\.b.c" -> ["a.b", "c"]   (backslash escapes a literal dot)

    Empty paths and empty segments ("a..b", ".a", "a.") are rejected.
    """
    if not isinstance(path, str):
        raise TypeError(f"dot-path must be a str, got {type(path).__name__}")
    if path == "":
        raise InvalidDotPathError(path, "empty path")

    segments: list[str] = []
    current: list[str] = []
    chars = iter(path)
    for ch in chars:
        if ch == ESCAPE:
            nxt = next(chars, None)
            if nxt == SEPARATOR:
                current.append(SEPARATOR)
            else:
                current.append(ch)
                if nxt is not None:
                    current.append(nxt)
            continue
        if ch == SEPARATOR:
            segments.append("".join(current))
            current = []
            continue
        current.append(ch)
    segments.append("".join(current))

    if any(seg == "" for seg in segments):
        raise InvalidDotPathError(path)
    return segments


def _parent(doc: Mapping[str, Any], segments: list[str]) -> Mapping[str, Any] | None:
    node: Any = doc
    for seg in segments[:-1]:
        if not is_document(node) or seg not in node:
            return None
        node = node[seg]
    return node if is_document(node) else None


def get(doc: Mapping[str, Any], path: str, default: Any = None) -> Any:
    segments = split_path(path)
    parent = _parent(doc, segments)
    if parent is None or segments[-1] not in parent:
        return default
    return parent[segments[-1]]


def has(doc: Mapping[str, Any], path: str) -> bool:
    segments = split_path(path)
    parent = _parent(doc, segments)
    return parent is not None and segments[-1] in parent


def set(doc: dict[str, Any], key: str | Mapping[str, Any], value: Any = None) -> dict[str, Any]:
    """
    Assign `value` at `key`, creating intermediate maps as needed.

    Intermediate values that are not maps are replaced by a new empty map.
    When `key` is itself a mapping every entry is assigned in turn and
    `value` is ignored. Mutates and returns `doc`.
    """
    if is_document(key):
        # Reject a bad path before touching the document.
        for k in key:
            split_path(k)
        for k, v in key.items():
            set(doc, k, v)
        return doc

    segments = split_path(key)
    node = doc
    for seg in segments[:-1]:
        child = node.get(seg)
        if not isinstance(child, dict):
            child = dict(child) if is_document(child) else {}
            node[seg] = child
        node = child
    node[segments[-1]] = value
    return doc


def delete(doc: dict[str, Any], path: str) -> bool:
    """Remove the terminal key. Returns False (no error) when nothing was there."""
    segments = split_path(path)
    parent = _parent(doc, segments)
    if parent is None or segments[-1] not in parent:
        return False
    del parent[segments[-1]]
    return True
