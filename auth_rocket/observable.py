"""Single-value publish/subscribe primitive for the current-user slot

A ``BehaviorSubject`` holds the latest value and replays it to every new
subscriber before pushing later changes. ``Observable`` is the read-only
view handed out to consumers.
"""

import asyncio
import logging
import threading
from typing import AsyncIterator, Callable, Generic, List, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")
Handler = Callable[[T], None]


class Subscription:
    """Handle returned by ``subscribe``; call ``unsubscribe`` to stop updates"""

    def __init__(self, subject: "BehaviorSubject", handler: Handler):
        self._subject = subject
        self._handler = handler
        self.closed = False

    def unsubscribe(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._subject._remove(self._handler)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unsubscribe()


class BehaviorSubject(Generic[T]):
    """Holds a current value and pushes every change to subscribers"""

    def __init__(self, initial: T):
        self._value = initial
        self._handlers: List[Handler] = []
        self._lock = threading.RLock()

    @property
    def value(self) -> T:
        return self._value

    def next(self, value: T) -> None:
        """Store a new value and notify subscribers

        Handlers run outside the lock; a failing handler is logged and
        does not stop the others.
        """
        with self._lock:
            self._value = value
            handlers_to_notify = self._handlers.copy()

        for handler in handlers_to_notify:
            self._notify(handler, value)

    def subscribe(self, handler: Handler) -> Subscription:
        """Register a handler; it is called at once with the current value

        The replay runs under the lock and before registration, so a
        concurrent ``next`` is either replayed or delivered after it.
        """
        with self._lock:
            current = self._value
            self._notify(handler, current)
            self._handlers.append(handler)
            # The replay itself may have published a newer value
            if self._value is not current:
                self._notify(handler, self._value)

        return Subscription(self, handler)

    def as_observable(self) -> "Observable[T]":
        return Observable(self)

    def _remove(self, handler: Handler) -> None:
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)

    def _notify(self, handler: Handler, value: T) -> None:
        try:
            handler(value)
        except Exception as e:
            logger.error(f"Subscriber {handler!r} raised: {e}")


class Observable(Generic[T]):
    """Read-only view of a BehaviorSubject"""

    def __init__(self, subject: BehaviorSubject):
        self._subject = subject

    @property
    def value(self) -> T:
        """Latest value pushed to subscribers"""
        return self._subject.value

    def subscribe(self, handler: Handler) -> Subscription:
        return self._subject.subscribe(handler)

    async def updates(self) -> AsyncIterator[T]:
        """Yield the current value, then every change, until the consumer stops

        Must be iterated on the event loop thread that publishes changes.
        """
        queue: "asyncio.Queue[T]" = asyncio.Queue()
        subscription = self._subject.subscribe(queue.put_nowait)
        try:
            while True:
                yield await queue.get()
        finally:
            subscription.unsubscribe()
