from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def start(self) -> None:
        ...

    def cancel(self) -> None:
        ...


# Same call shape as threading.Timer(interval, function).
TimerFactory = Callable[[float, Callable[[], Any]], TimerHandle]
Clock = Callable[[], float]


def thread_timer(interval: float, function: Callable[[], Any]) -> TimerHandle:
    timer = threading.Timer(interval, function)
    # Non-daemon: the interpreter waits for a pending write before exiting.
    timer.daemon = False
    timer.name = "levers-deferred-write"
    return timer


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class WritePending:
    deadline: float
    generation: int
    timer: TimerHandle


IDLE = Idle()


class WriteCoalescer:
    """
    Decides, for every write request, whether to persist now or later.

    A request more than `sync_threshold` seconds after the previous one is
    written synchronously. A request inside that window replaces any pending
    deferred write with a new one `write_delay` seconds out. Either way the
    request time becomes the new last-sync time.

    The deferred write calls `write()` when the timer fires, so it persists
    whatever state the owner holds at that moment. There is never more than
    one pending write: `_state` is either IDLE or a single WritePending.
    """

    def __init__(
        self,
        write: Callable[[], None],
        *,
        sync_threshold: float = 0.25,
        write_delay: float = 0.275,
        clock: Clock = time.monotonic,
        timer_factory: TimerFactory = thread_timer,
        lock: threading.RLock | None = None,
    ) -> None:
        self._write = write
        self._sync_threshold = sync_threshold
        self._write_delay = write_delay
        self._clock = clock
        self._timer_factory = timer_factory
        self._lock = lock if lock is not None else threading.RLock()

        self._state: Idle | WritePending = IDLE
        self._generation = 0
        self._last_sync: float | None = None
        self._dirty = False

    @property
    def state(self) -> Idle | WritePending:
        return self._state

    @property
    def pending(self) -> bool:
        return isinstance(self._state, WritePending)

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def last_sync(self) -> float | None:
        return self._last_sync

    def mark_synced(self) -> None:
        with self._lock:
            self._last_sync = self._clock()

    def request(self) -> bool:
        """Ask for the owner's current state to be persisted. Returns True if written synchronously."""
        with self._lock:
            now = self._clock()
            elapsed = float("inf") if self._last_sync is None else now - self._last_sync
            self._cancel_pending()
            self._dirty = True
            self._last_sync = now

            if elapsed > self._sync_threshold:
                self._write_now()
                return True

            self._generation += 1
            generation = self._generation
            timer = self._timer_factory(self._write_delay, lambda: self._fire(generation))
            self._state = WritePending(deadline=now + self._write_delay, generation=generation, timer=timer)
            timer.start()
            logger.debug("LEVERS DEBOUNCE: deferred write scheduled in %.3fs", self._write_delay)
            return False

    def flush(self) -> bool:
        """Write now if anything is pending or a previous deferred write failed."""
        with self._lock:
            self._cancel_pending()
            if not self._dirty:
                return False
            self._write_now()
            self._last_sync = self._clock()
            return True

    def _cancel_pending(self) -> None:
        state = self._state
        if isinstance(state, WritePending):
            state.timer.cancel()
            self._state = IDLE

    def _write_now(self) -> None:
        self._write()
        self._dirty = False

    def _fire(self, generation: int) -> None:
        with self._lock:
            state = self._state
            # A timer cancelled after it already started must not write.
            if not isinstance(state, WritePending) or state.generation != generation:
                return
            try:
                self._write_now()
            except Exception:
                logger.exception("LEVERS DEBOUNCE: deferred write failed; will retry on flush()")
            finally:
                self._state = IDLE
