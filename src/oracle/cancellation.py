"""Caller-driven cancellation for in-flight completions."""

from __future__ import annotations

import threading
from typing import Callable

from oracle.llm.base import CancelledError


class CancellationToken:
    """Thread-safe cancellation signal.

    Clients register close callbacks for the resources they hold (such as an
    open HTTP response) so a cancel from another thread interrupts blocking
    reads instead of waiting for the network.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Fire the token and run every registered callback once."""

        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks = list(self._callbacks)
            self._callbacks.clear()
        for callback in callbacks:
            callback()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CancelledError("Completion was cancelled.")

    def register(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a callback to run on cancel.

        The callback runs immediately when the token has already fired.

        Returns:
            A function that unregisters the callback.
        """

        with self._lock:
            fired = self._event.is_set()
            if not fired:
                self._callbacks.append(callback)
        if fired:
            callback()

        def unregister() -> None:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return unregister

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or ``timeout`` elapses."""

        return self._event.wait(timeout)
