"""Cancellation context and bounded queues connecting pipeline roles."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

from hashwalk.errors import CancellationError

T = TypeVar("T")


class RunContext:
    """Shared cancellation signal holding the first error of a run.

    Any role may call :meth:`fail`; the first exception recorded wins and
    every registered listener is woken so blocked roles can unwind.
    """

    def __init__(self) -> None:
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._error: BaseException | None = None
        self._listeners: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def error(self) -> BaseException | None:
        with self._lock:
            return self._error

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register ``callback`` to run once the context is cancelled."""
        with self._lock:
            self._listeners.append(callback)
            already_cancelled = self._cancelled.is_set()
        if already_cancelled:
            callback()

    def fail(self, exc: BaseException) -> bool:
        """Record ``exc`` and cancel the run.

        Returns:
            True if ``exc`` is the first error recorded for this run
        """
        with self._lock:
            first = self._error is None
            if first:
                self._error = exc
            listeners = list(self._listeners)
        self._cancelled.set()
        for callback in listeners:
            callback()
        return first

    def cancel(self, reason: str = "run cancelled") -> None:
        """Cancel the run from outside the pipeline (e.g. a timeout)."""
        self.fail(CancellationError(reason))

    def raise_if_cancelled(self) -> None:
        if self._cancelled.is_set():
            raise CancellationError("run cancelled")


class BoundedQueue(Generic[T]):
    """Fixed-capacity FIFO that can be closed and observes cancellation.

    ``put`` blocks while the queue is full; iteration blocks while it is empty
    and still open, and stops once it is closed and drained. Both raise
    :class:`CancellationError` as soon as the owning context is cancelled.
    """

    def __init__(self, capacity: int, context: RunContext) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._context = context
        self._items: deque[T] = deque()
        self._closed = False
        self._cond = threading.Condition()
        context.add_listener(self._wake)

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def _wake(self) -> None:
        with self._cond:
            self._cond.notify_all()

    def put(self, item: T) -> None:
        with self._cond:
            while True:
                self._context.raise_if_cancelled()
                if self._closed:
                    raise RuntimeError("put() on a closed queue")
                if len(self._items) < self.capacity:
                    break
                self._cond.wait()
            self._items.append(item)
            self._cond.notify_all()

    def close(self) -> None:
        """Signal end-of-input; consumers drain what is left and stop."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def __iter__(self) -> Iterator[T]:
        while True:
            with self._cond:
                while True:
                    self._context.raise_if_cancelled()
                    if self._items:
                        item = self._items.popleft()
                        self._cond.notify_all()
                        break
                    if self._closed:
                        return
                    self._cond.wait()
            yield item
