"""Cancellable scheduled callbacks tied to component lifetime.

Every timer-driven effect (countdown, typewriter, duration tick, control
auto-hide) goes through a Scheduler and is owned by a Component. Unmounting
the component cancels whatever is still pending, so nothing fires afterwards.

ManualScheduler runs on a virtual clock and is what tests and snapshot
rendering use. ThreadScheduler runs callbacks on threading.Timer threads.
"""

import abc
import heapq
import itertools
import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)


class TimerHandle:
    """Handle for a pending one-shot or repeating callback."""

    def __init__(self, callback: Callable[[], None], interval: float | None = None) -> None:
        self.callback = callback
        self.interval = interval
        self.cancelled = False
        self.fire_count = 0

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self) -> None:
        self.cancelled = True

    def _fire(self) -> None:
        if self.cancelled:
            return
        self.fire_count += 1
        self.callback()


class Scheduler(abc.ABC):
    """Source of time and delayed callbacks."""

    @abc.abstractmethod
    def now(self) -> float:
        """Seconds since the epoch."""
        ...

    @abc.abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...

    @abc.abstractmethod
    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class ManualScheduler(Scheduler):
    """Virtual-clock scheduler. Time only moves through advance()."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def _push(self, due: float, handle: TimerHandle) -> None:
        heapq.heappush(self._queue, (due, next(self._seq), handle))

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(callback)
        self._push(self._now + max(delay, 0.0), handle)
        return handle

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = TimerHandle(callback, interval)
        self._push(self._now + interval, handle)
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due callbacks in time order."""
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target + 1e-6:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = max(self._now, due)
            handle._fire()
            if handle.repeating and not handle.cancelled:
                self._push(due + handle.interval, handle)  # type: ignore[operator]
        self._now = target


class ThreadScheduler(Scheduler):
    """Wall-clock scheduler backed by threading.Timer."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def now(self) -> float:
        return time.time()

    def _arm(self, delay: float, handle: TimerHandle) -> None:
        def run() -> None:
            if handle.cancelled:
                return
            with self._lock:
                handle._fire()
            if handle.repeating and not handle.cancelled:
                self._arm(handle.interval, handle)  # type: ignore[arg-type]

        timer = threading.Timer(max(delay, 0.0), run)
        timer.daemon = True
        timer.start()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(callback)
        self._arm(delay, handle)
        return handle

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = TimerHandle(callback, interval)
        self._arm(interval, handle)
        return handle


class Component:
    """Base for anything that owns timers. Unmount cancels them all."""

    def __init__(self, scheduler: Scheduler) -> None:
        self.scheduler = scheduler
        self.mounted = False
        self._handles: list[TimerHandle] = []

    def mount(self) -> None:
        self.mounted = True

    def unmount(self) -> None:
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()
        self.mounted = False

    def _track(self, handle: TimerHandle) -> TimerHandle:
        self._handles = [h for h in self._handles if not h.cancelled and (h.repeating or not h.fire_count)]
        self._handles.append(handle)
        return handle

    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        if not self.mounted:
            raise RuntimeError(f"{type(self).__name__} is not mounted")
        return self._track(self.scheduler.call_later(delay, callback))

    def every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        if not self.mounted:
            raise RuntimeError(f"{type(self).__name__} is not mounted")
        return self._track(self.scheduler.call_every(interval, callback))

    @property
    def live_timers(self) -> int:
        return sum(1 for h in self._handles if not h.cancelled and (h.repeating or not h.fire_count))
