"""
Runtime timer substrate for the session.

This module handles scheduling of the session's timers and the scoped
acquisition and release of everything a screen installs: repeating ticks,
one-shot delays and the set of event types the screen listens to.

Two schedulers share one interface: VirtualScheduler runs on a virtual
clock advanced explicitly (tests, scripted runs), AsyncioScheduler runs on
an asyncio event loop in wall time.
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional

from ..errors import TimerScopeError
from ..logging.config import get_timer_logger
from .models import EventType, Screen, TimerKind

logger = get_timer_logger(__name__)

Callback = Callable[[], None]


class TimerHandle:
    """Cancellable reference to a scheduled callback."""

    def __init__(self, name: str, repeating: bool = False):
        self.name = name
        self.repeating = repeating
        self._cancelled = False
        self._finished = False
        self._on_cancel: Optional[Callback] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        return not (self._cancelled or self._finished)

    def cancel(self) -> None:
        """Cancel the timer. Cancelling twice is a no-op."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()
            self._on_cancel = None

    def _bind_cancel(self, on_cancel: Optional[Callback]) -> None:
        self._on_cancel = on_cancel

    def _mark_finished(self) -> None:
        self._finished = True


class Scheduler(ABC):
    """Single-threaded timer scheduler."""

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callback, name: str = "timer") -> TimerHandle:
        """Run ``callback`` once after ``delay_ms``."""

    @abstractmethod
    def call_every(self, interval_ms: float, callback: Callback, name: str = "timer") -> TimerHandle:
        """Run ``callback`` every ``interval_ms`` until cancelled."""

    @abstractmethod
    def now_ms(self) -> float:
        """Current scheduler time in milliseconds."""


@dataclass(order=True)
class _Scheduled:
    due: float
    seq: int
    handle: TimerHandle = field(compare=False)
    callback: Callback = field(compare=False)
    interval: Optional[float] = field(compare=False, default=None)


class VirtualScheduler(Scheduler):
    """
    Deterministic scheduler on a virtual clock.

    Nothing fires until ``advance`` is called. Callbacks due at the same
    instant fire in the order they were scheduled; a repeating timer keeps
    its place relative to timers started after it.
    """

    def __init__(self, start_ms: float = 0.0):
        self._now = start_ms
        self._queue: list[_Scheduled] = []
        self._seq = itertools.count()

    def now_ms(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callback, name: str = "timer") -> TimerHandle:
        handle = TimerHandle(name)
        self._push(self._now + delay_ms, handle, callback, None)
        return handle

    def call_every(self, interval_ms: float, callback: Callback, name: str = "timer") -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError(f"Interval must be positive, got {interval_ms}")
        handle = TimerHandle(name, repeating=True)
        self._push(self._now + interval_ms, handle, callback, interval_ms)
        return handle

    def _push(self, due: float, handle: TimerHandle, callback: Callback,
              interval: Optional[float]) -> None:
        heapq.heappush(self._queue, _Scheduled(due, next(self._seq), handle, callback, interval))

    def advance(self, ms: float) -> int:
        """
        Move the clock forward, firing everything that falls due.

        Args:
            ms: Milliseconds to advance

        Returns:
            Number of callbacks fired
        """
        target = self._now + ms
        fired = 0

        while self._queue and self._queue[0].due <= target:
            entry = heapq.heappop(self._queue)
            if entry.handle.cancelled:
                continue

            self._now = entry.due
            if entry.interval is not None:
                # Re-arm before running so the callback can cancel it
                self._push(entry.due + entry.interval, entry.handle, entry.callback, entry.interval)
            else:
                entry.handle._mark_finished()

            entry.callback()
            fired += 1

        self._now = target
        return fired

    def pending(self) -> int:
        """Number of live scheduled callbacks."""
        return sum(1 for entry in self._queue if not entry.handle.cancelled)


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop, in wall time."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now_ms(self) -> float:
        return self.loop.time() * 1000

    def call_later(self, delay_ms: float, callback: Callback, name: str = "timer") -> TimerHandle:
        handle = TimerHandle(name)

        def run() -> None:
            handle._mark_finished()
            callback()

        loop_handle = self.loop.call_later(delay_ms / 1000, run)
        handle._bind_cancel(loop_handle.cancel)
        return handle

    def call_every(self, interval_ms: float, callback: Callback, name: str = "timer") -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError(f"Interval must be positive, got {interval_ms}")
        handle = TimerHandle(name, repeating=True)
        interval_s = interval_ms / 1000
        start = self.loop.time()
        ticks = itertools.count(1)

        def arm() -> None:
            # Absolute due times keep the period from drifting
            loop_handle = self.loop.call_at(start + next(ticks) * interval_s, run)
            handle._bind_cancel(loop_handle.cancel)

        def run() -> None:
            if handle.cancelled:
                return
            arm()
            callback()

        arm()
        return handle


class ScreenScope:
    """
    Timers and listeners owned by one screen.

    A scope is acquired when its screen is entered and released exactly
    once when the screen is left. Releasing cancels every timer and empties
    the listener set; a callback that still reaches a released scope does
    nothing. Usable as a context manager.
    """

    def __init__(
        self,
        screen: Screen,
        scheduler: Scheduler,
        listeners: frozenset[EventType],
        session_id: str = ""
    ):
        self.screen = screen
        self.session_id = session_id
        self._scheduler = scheduler
        self._listeners = listeners
        self._timers: dict[TimerKind, TimerHandle] = {}
        self._released = False

        logger.debug(
            "Screen scope acquired",
            session_id=session_id,
            screen=screen.value,
            listeners=sorted(event.value for event in listeners),
        )

    @property
    def released(self) -> bool:
        return self._released

    @property
    def listeners(self) -> frozenset[EventType]:
        return self._listeners

    def accepts(self, event_type: EventType) -> bool:
        return not self._released and event_type in self._listeners

    def active_timers(self) -> tuple[TimerKind, ...]:
        return tuple(kind for kind, handle in self._timers.items() if handle.active)

    def start_timer(
        self,
        kind: TimerKind,
        interval_ms: float,
        callback: Callback,
        repeating: bool = True
    ) -> TimerHandle:
        """
        Acquire a timer for this scope, replacing any live timer of the same kind.

        Raises:
            TimerScopeError: If the scope was already released
        """
        if self._released:
            raise TimerScopeError(
                f"Cannot start {kind.value} on released {self.screen.value} scope",
                scope_screen=self.screen.value,
                resource=kind.value,
            )

        self.cancel_timer(kind)

        def guarded() -> None:
            if self._released or handle.cancelled:
                return
            callback()

        if repeating:
            handle = self._scheduler.call_every(interval_ms, guarded, name=kind.value)
        else:
            handle = self._scheduler.call_later(interval_ms, guarded, name=kind.value)

        self._timers[kind] = handle
        logger.debug(
            "Timer started",
            session_id=self.session_id,
            screen=self.screen.value,
            timer=kind.value,
            interval_ms=interval_ms,
            repeating=repeating,
        )
        return handle

    def cancel_timer(self, kind: TimerKind) -> None:
        handle = self._timers.pop(kind, None)
        if handle is not None and handle.active:
            handle.cancel()
            logger.debug(
                "Timer cancelled",
                session_id=self.session_id,
                screen=self.screen.value,
                timer=kind.value,
            )

    def release(self) -> None:
        """Cancel every timer and drop every listener. Idempotent."""
        if self._released:
            return

        for kind in list(self._timers):
            self.cancel_timer(kind)
        self._listeners = frozenset()
        self._released = True

        logger.debug(
            "Screen scope released",
            session_id=self.session_id,
            screen=self.screen.value,
        )

    def __enter__(self) -> "ScreenScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
