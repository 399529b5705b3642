"""Payload-less broadcast signals replaying the latest emission."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from threading import RLock
from typing import NamedTuple

logger = logging.getLogger("notelabels.core.signals")

Listener = Callable[[], None]


class SignalTrace(NamedTuple):
    """State of a signal right after an emission, attached to trace records."""

    signal: str
    count: int
    listeners: int
    subscriptions: int


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class Subscription:
    """Asynchronous view over a :class:`ChangeSignal`.

    Iterating yields ``None`` each time at least one signal arrived since the
    previous step.  Signals emitted while the consumer is busy coalesce into a
    single step, so a slow consumer only learns that *something* changed.
    """

    __slots__ = ("_signal", "_pending", "_closed", "_event", "_loop")

    def __init__(self, signal: ChangeSignal, *, pending: bool) -> None:
        self._signal = signal
        self._pending = pending
        self._closed = False
        self._event = asyncio.Event()
        # Bound here when subscribing from a coroutine, else on the first wait.
        self._loop: asyncio.AbstractEventLoop | None = _running_loop()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> bool:
        """Return ``True`` when a signal is waiting to be consumed."""
        return self._pending

    def _wake(self) -> None:
        # Caller holds the signal lock, so _loop cannot change underneath.
        loop = self._loop
        if loop is None or loop.is_closed() or loop is _running_loop():
            self._event.set()
        else:
            loop.call_soon_threadsafe(self._event.set)

    def _notify(self) -> None:
        self._pending = True
        self._wake()

    def close(self) -> None:
        """Detach from the signal and end any iteration in progress."""
        with self._signal._lock:
            if self._closed:
                return
            self._closed = True
            self._signal._subscriptions.discard(self)
            self._wake()

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> None:
        while True:
            with self._signal._lock:
                if self._closed:
                    raise StopAsyncIteration
                self._loop = asyncio.get_running_loop()
                self._event.clear()
                if self._pending:
                    self._pending = False
                    return None
            await self._event.wait()


class ChangeSignal:
    """Broadcast "something changed" to listeners with a replay depth of one.

    Anyone attaching after a signal was emitted immediately receives that
    signal, so a late subscriber's first read reflects at least the state at
    the time it subscribed.
    """

    def __init__(self, name: str = "change", *, trace: bool = False) -> None:
        self.name = name
        self._trace = trace
        self._lock = RLock()
        self._emit_count = 0
        self._listeners: dict[Listener, None] = {}
        self._subscriptions: set[Subscription] = set()

    @property
    def has_replay(self) -> bool:
        """Return ``True`` once the signal has been emitted at least once."""
        with self._lock:
            return self._emit_count > 0

    @property
    def emit_count(self) -> int:
        with self._lock:
            return self._emit_count

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* and return a callable removing it.

        The cached signal, if any, is replayed to *listener* right away.
        """

        with self._lock:
            self._listeners[listener] = None
            replay = self._emit_count > 0
        if replay:
            self._call_listener(listener)

        def _remove() -> None:
            self.remove_listener(listener)

        return _remove

    def remove_listener(self, listener: Listener) -> None:
        """Unregister *listener* ignoring unknown references."""

        with self._lock:
            self._listeners.pop(listener, None)

    def subscribe(self) -> Subscription:
        """Return a new asynchronous :class:`Subscription`."""
        with self._lock:
            subscription = Subscription(self, pending=self._emit_count > 0)
            self._subscriptions.add(subscription)
        return subscription

    def try_emit(self) -> bool:
        """Emit without waiting for anyone.

        Never blocks and never fails the caller: listener errors are logged.
        Returns ``True`` as the signal is always accepted.
        """

        with self._lock:
            self._emit_count += 1
            count = self._emit_count
            listeners = tuple(self._listeners)
            subscriptions = len(self._subscriptions)
            for subscription in self._subscriptions:
                subscription._notify()
        if self._trace:
            logger.debug(
                "signal emitted",
                extra={
                    "signal_trace": SignalTrace(
                        self.name, count, len(listeners), subscriptions
                    )
                },
            )
        for listener in listeners:
            self._call_listener(listener)
        return True

    async def emit(self) -> None:
        """Emit and yield once so waiting subscribers observe the signal."""
        self.try_emit()
        await asyncio.sleep(0)

    def _call_listener(self, listener: Listener) -> None:
        try:
            listener()
        except Exception:
            logger.exception("Listener of signal %r raised an exception", self.name)


__all__ = ["ChangeSignal", "Listener", "SignalTrace", "Subscription"]
