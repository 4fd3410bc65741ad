"""Repeating one-second tick sources.

A ticker only ever calls its callback; it never touches session state.  The
controller passes a callback that posts a ``Tick`` onto its own event queue,
which marshals every tick back onto the single event loop.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional, Protocol

TICK_INTERVAL = 1.0


class Ticker(Protocol):
    @property
    def active(self) -> bool: ...

    def start(self, callback: Callable[[], None]) -> None: ...

    def cancel(self) -> None: ...


class ThreadTicker:
    """Fires *callback* every *interval* seconds from a daemon thread.

    ``start`` always cancels the previous source first, so at most one
    thread is ticking at a time.
    """

    def __init__(self, interval: float = TICK_INTERVAL) -> None:
        self._interval = interval
        self._stop: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        return self._stop is not None and not self._stop.is_set()

    def start(self, callback: Callable[[], None]) -> None:
        self.cancel()
        stop = threading.Event()
        thread = threading.Thread(
            target=self._run, args=(stop, callback), name="plunge-ticker", daemon=True
        )
        self._stop = stop
        self._thread = thread
        thread.start()

    def cancel(self) -> None:
        if self._stop is not None:
            self._stop.set()
        self._stop = None
        self._thread = None

    def _run(self, stop: threading.Event, callback: Callable[[], None]) -> None:
        # Each thread watches its own stop event, so a cancelled source
        # exits even if a newer one has already been started.
        while not stop.wait(self._interval):
            callback()


class ManualTicker:
    """A ticker that only fires when told to; for tests and simulations."""

    def __init__(self) -> None:
        self._callback: Optional[Callable[[], None]] = None
        self.starts = 0

    @property
    def active(self) -> bool:
        return self._callback is not None

    def start(self, callback: Callable[[], None]) -> None:
        self.cancel()
        self._callback = callback
        self.starts += 1

    def cancel(self) -> None:
        self._callback = None

    def fire(self, times: int = 1) -> None:
        """Invoke the active callback *times* times; no-op when cancelled."""
        for _ in range(times):
            if self._callback is None:
                return
            self._callback()
