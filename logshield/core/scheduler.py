"""
Scheduler interface for delayed and repeating work.

AsyncioScheduler is used by the API; ManualScheduler drives a virtual clock for
tests and offline scripts.
"""
import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional

Callback = Callable[[], None]


class TaskHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        ...

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        ...


class Scheduler(ABC):
    @abstractmethod
    def call_later(self, delay: float, fn: Callback) -> TaskHandle:
        ...

    @abstractmethod
    def call_every(self, interval: float, fn: Callback) -> TaskHandle:
        ...


class _AsyncioHandle(TaskHandle):
    def __init__(self):
        self._handle: Optional[asyncio.Handle] = None
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class AsyncioScheduler(Scheduler):
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, fn: Callback) -> TaskHandle:
        handle = _AsyncioHandle()
        handle._handle = self.loop.call_later(delay, fn)
        return handle

    def call_every(self, interval: float, fn: Callback) -> TaskHandle:
        handle = _AsyncioHandle()
        loop = self.loop

        def _tick():
            if handle.cancelled:
                return
            handle._handle = loop.call_later(interval, _tick)
            fn()

        handle._handle = loop.call_later(interval, _tick)
        return handle


@dataclass(eq=False)
class _ManualTask(TaskHandle):
    due: float
    fn: Callback
    interval: Optional[float] = None
    _cancelled: bool = field(default=False, repr=False)

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """Virtual clock; nothing runs until advance() is called."""

    def __init__(self):
        self.now = 0.0
        self._tasks: List[_ManualTask] = []

    def call_later(self, delay: float, fn: Callback) -> TaskHandle:
        task = _ManualTask(due=self.now + delay, fn=fn)
        self._tasks.append(task)
        return task

    def call_every(self, interval: float, fn: Callback) -> TaskHandle:
        task = _ManualTask(due=self.now + interval, fn=fn, interval=interval)
        self._tasks.append(task)
        return task

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            pending = [t for t in self._tasks if not t.cancelled and t.due <= target]
            if not pending:
                break
            task = min(pending, key=lambda t: t.due)
            self.now = task.due
            if task.interval is None:
                self._tasks.remove(task)
            else:
                task.due += task.interval
            task.fn()
        self._tasks = [t for t in self._tasks if not t.cancelled]
        self.now = target
