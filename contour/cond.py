"""A condition variable whose waiters are notified through queues."""

from __future__ import annotations

import queue
import threading


class Cond:
    """A rendezvous point for threads waiting for, or announcing, an event.

    Waiters register a queue and a sequence number. Each call to ``notify``
    puts the new sequence number on every registered queue, which lets a
    waiter block on several sources at once.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._waiters: list[queue.Queue[int]] = []
        self._last = 0

    @property
    def last(self) -> int:
        """The number of times ``notify`` has been called."""
        with self._lock:
            return self._last

    def register(self, ch: queue.Queue[int], last: int) -> None:
        """Register ``ch`` to receive the sequence number on the next notify.

        If ``last`` is lower than the number of notifications so far, the
        caller has missed at least one and ``ch`` receives the current
        sequence number at once. Notification never blocks, so ``ch`` must
        have room for at least one value; a full queue raises ``queue.Full``.
        """
        with self._lock:
            if last < self._last:
                ch.put_nowait(self._last)
                return
            self._waiters.append(ch)

    def notify(self) -> None:
        """Notify all registered waiters that an event has occurred."""
        with self._lock:
            self._last += 1
            waiters, self._waiters = self._waiters, []
            for ch in waiters:
                ch.put_nowait(self._last)