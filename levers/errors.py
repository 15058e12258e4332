from __future__ import annotations


class LeversError(Exception):
    """Base class for errors raised by levers itself (I/O errors propagate as OSError)."""


class InvalidDotPathError(LeversError, ValueError):
    def __init__(self, path: str, reason: str = "empty path segment") -> None:
        super().__init__(f"invalid dot-path {path!r}: {reason}")
        self.path = path
        self.reason = reason
