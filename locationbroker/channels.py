"""Notification channels used by the broker to fan out updates.

Two flavours share the same delivery machinery:

* ``LatestValueChannel`` keeps the last committed value and replays it to
  every new subscriber before forwarding later changes.
* ``EventChannel`` keeps nothing; subscribers only see values published
  after they attach.

Subscribers are delivered to inline by default. A subscriber that may be slow
can register with ``threaded=True`` to get its own worker thread fed by an
unbounded queue, so it never holds up the publisher.
"""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable
from typing import Generic, Optional, TypeVar

from locationbroker.logging import LOCATIONBROKER_LOGGER

T = TypeVar("T")

_STOP = object()


class _Subscriber(Generic[T]):
    """Inline subscriber; failures are logged and never reach the publisher."""

    def __init__(self, callback: Callable[[T], None], channel_name: str) -> None:
        self.callback = callback
        self.channel_name = channel_name

    def deliver(self, value: T) -> None:
        self._invoke(value)

    def close(self) -> None:
        pass

    def _invoke(self, value: T) -> None:
        try:
            self.callback(value)
        except Exception as e:
            LOCATIONBROKER_LOGGER.error(f"Subscriber to {self.channel_name} failed: {e}", exc_info=True)


class _ThreadedSubscriber(_Subscriber[T]):
    """Subscriber with a dedicated worker thread and an unbounded queue."""

    def __init__(self, callback: Callable[[T], None], channel_name: str) -> None:
        super().__init__(callback, channel_name)
        self._queue: queue.SimpleQueue = queue.SimpleQueue()
        self._thread = threading.Thread(target=self._run, daemon=True, name=f"{channel_name}-subscriber")
        self._thread.start()

    def deliver(self, value: T) -> None:
        self._queue.put(value)

    def close(self) -> None:
        self._queue.put(_STOP)

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for queued deliveries to drain after ``close()``."""
        self._thread.join(timeout=timeout)

    def _run(self) -> None:
        while True:
            value = self._queue.get()
            if value is _STOP:
                return
            self._invoke(value)


class Subscription:
    """Handle returned by ``subscribe``; cancel it to stop receiving values."""

    def __init__(self, channel: "_Channel", subscriber: _Subscriber) -> None:
        self._channel = channel
        self._subscriber = subscriber
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._channel._remove(self._subscriber)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()


class _Channel(Generic[T]):
    def __init__(self, name: str) -> None:
        self.name = name
        # Serialises delivery so every subscriber sees values in publish order
        self._delivery_lock = threading.RLock()
        self._subscribers: list[_Subscriber[T]] = []

    @property
    def subscriber_count(self) -> int:
        with self._delivery_lock:
            return len(self._subscribers)

    def subscribe(self, callback: Callable[[T], None], *, threaded: bool = False) -> Subscription:
        """
        Register ``callback`` for values published on this channel.

        Inline callbacks (the default) run on the publishing thread, in
        publish order, and hold up the publisher until they return. Pass
        ``threaded=True`` for callbacks that may be slow or block: they get a
        worker thread and an unbounded queue, so the publisher never waits,
        but they run after the publish call rather than during it.

        Returns:
            Subscription handle; ``cancel()`` it to stop receiving values.
        """
        with self._delivery_lock:
            subscriber = self._make_subscriber(callback, threaded)
            self._subscribers.append(subscriber)
            self._on_subscribed(subscriber)
        return Subscription(self, subscriber)

    def _make_subscriber(self, callback: Callable[[T], None], threaded: bool) -> _Subscriber[T]:
        if threaded:
            return _ThreadedSubscriber(callback, self.name)
        return _Subscriber(callback, self.name)

    def _on_subscribed(self, subscriber: _Subscriber[T]) -> None:
        pass

    def _remove(self, subscriber: _Subscriber[T]) -> None:
        with self._delivery_lock:
            try:
                self._subscribers.remove(subscriber)
            except ValueError:
                return
        subscriber.close()

    def _deliver_all(self, value: T) -> None:
        for subscriber in list(self._subscribers):
            subscriber.deliver(value)


class EventChannel(_Channel[T]):
    """Edge-triggered channel: no stored value, no replay."""

    def publish(self, value: T) -> None:
        with self._delivery_lock:
            self._deliver_all(value)


class LatestValueChannel(_Channel[T]):
    """Replay-of-one channel holding the most recently committed value."""

    def __init__(self, name: str, initial: Optional[T] = None) -> None:
        super().__init__(name)
        self._value_lock = threading.Lock()
        self._value = initial

    @property
    def value(self) -> Optional[T]:
        with self._value_lock:
            return self._value

    def set(self, value: T) -> None:
        """Commit ``value`` and then publish it to current subscribers."""
        with self._delivery_lock:
            with self._value_lock:
                self._value = value
            self._deliver_all(value)

    def _on_subscribed(self, subscriber: _Subscriber[T]) -> None:
        # Late subscribers start from the committed value, which may still be None
        subscriber.deliver(self.value)
