from __future__ import annotations

from pathlib import Path
import sys
from typing import Any, Callable

import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for `import levers` when the package is not installed.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


_LEVERS_ENV = (
    "LEVERS_APP_NAME",
    "LEVERS_DATA_HOME",
    "LEVERS_DEBOUNCE",
    "LEVERS_SYNC_THRESHOLD_MS",
    "LEVERS_WRITE_DELAY_MS",
    "LEVERS_INDENT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _LEVERS_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def data_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Redirect the platform data root to a temp directory so tests never touch
    the real per-user settings folder.
    """
    home = tmp_path / "appdata"
    monkeypatch.setenv("LEVERS_DATA_HOME", str(home))
    return home


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTimer:
    def __init__(self, interval: float, function: Callable[[], Any]) -> None:
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False
        self.done = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        # Mirrors threading.Timer: a cancelled timer never runs its function.
        if not self.cancelled and not self.done:
            self.done = True
            self.function()


class FakeTimers:
    """Timer factory that records every timer so tests can fire them by hand."""

    def __init__(self) -> None:
        self.created: list[FakeTimer] = []

    def __call__(self, interval: float, function: Callable[[], Any]) -> FakeTimer:
        timer = FakeTimer(interval, function)
        self.created.append(timer)
        return timer

    @property
    def live(self) -> list[FakeTimer]:
        return [t for t in self.created if t.started and not t.cancelled and not t.done]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timers() -> FakeTimers:
    return FakeTimers()
