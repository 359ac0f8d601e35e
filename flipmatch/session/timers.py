"""
Reveal timers.

After the second card of a pair is flipped both cards stay up for a fixed
delay. The game arms one timer per pair through a RevealScheduler:

- AsyncioScheduler: real delays on the running event loop (HTTP service)
- ManualScheduler: a virtual clock that only moves when told to (tests, CLI)

Callbacks run to completion on the caller's thread; nothing here is
thread-safe and nothing needs to be.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable
import asyncio


class TimerHandle(ABC):
    """A scheduled callback that can be cancelled before it fires."""

    @abstractmethod
    def cancel(self) -> None:
        ...


class RevealScheduler(ABC):
    """Arms one-shot timers."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once after delay seconds."""
        ...


@dataclass
class _AsyncioHandle(TimerHandle):
    handle: asyncio.TimerHandle

    def cancel(self) -> None:
        self.handle.cancel()


class AsyncioScheduler(RevealScheduler):
    """
    Schedules on an asyncio event loop.

    Without an explicit loop, the loop running at call time is used, so
    call_later must be invoked from inside a coroutine or callback.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioHandle(loop.call_later(delay, callback))


@dataclass
class ManualTimer(TimerHandle):
    due: float
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler(RevealScheduler):
    """
    Deterministic scheduler driven by an explicit clock.

    Usage:
        scheduler = ManualScheduler()
        game = MemoryGame(scheduler=scheduler)
        game.flip(0); game.flip(1)
        scheduler.advance(1.0)  # reveal window closes
    """
    now: float = 0.0
    _timers: list[ManualTimer] = field(default_factory=list)

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = ManualTimer(due=self.now + delay, callback=callback)
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> list[ManualTimer]:
        """Timers that are armed and not cancelled."""
        return [t for t in self._timers if not t.cancelled and not t.fired]

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and fire every timer that came due.

        Returns the number of callbacks run.
        """
        self.now += seconds
        fired = 0
        while True:
            due = [t for t in self.pending if t.due <= self.now]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            timer.fired = True
            timer.callback()
            fired += 1
        self._timers = self.pending
        return fired

    def run_pending(self) -> int:
        """Jump to the last due time and fire everything armed."""
        pending = self.pending
        if not pending:
            return 0
        latest = max(t.due for t in pending)
        return self.advance(max(0.0, latest - self.now))
