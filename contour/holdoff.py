"""Coalescing of rapid change notifications into fewer rebuilds."""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Any, Callable, Protocol

HOLDOFF_DELAY = 0.1
HOLDOFF_MAX_DELAY = 0.5

_log = logging.getLogger(__name__)


class Notifier(Protocol):
    def on_change(self, builder: Any) -> None: ...


class DAGRebuiltMetric(Protocol):
    def set_dag_rebuilt_metric(self, timestamp: int) -> None: ...


class HoldoffNotifier:
    """Delays calls to ``on_change`` in the hope of coalescing bursts into one update.

    If more than ``max_delay`` seconds have passed since the last update the
    change is passed on at once; otherwise it is passed on after ``delay``
    seconds, unless a later change replaces it first.
    """

    def __init__(
        self,
        notifier: Notifier,
        metrics: DAGRebuiltMetric | None = None,
        *,
        delay: float = HOLDOFF_DELAY,
        max_delay: float = HOLDOFF_MAX_DELAY,
        clock: Callable[[], float] = time.monotonic,
        logger: logging.Logger | None = None,
    ) -> None:
        self._notifier = notifier
        self._metrics = metrics
        self._delay = delay
        self._max_delay = max_delay
        self._clock = clock
        self._log = logger or _log
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._last: float | None = None
        self._pending_lock = threading.Lock()
        self._pending = 0

    def pending(self) -> int:
        """The number of changes received since the last update."""
        with self._pending_lock:
            return self._pending

    def _inc_pending(self) -> None:
        with self._pending_lock:
            self._pending += 1

    def _reset_pending(self) -> int:
        with self._pending_lock:
            count, self._pending = self._pending, 0
            return count

    def _since_last(self) -> float:
        return math.inf if self._last is None else self._clock() - self._last

    def on_change(self, builder: Any) -> None:
        self._inc_pending()
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            since = self._since_last()
            if since > self._max_delay:
                self._log.info(
                    "forcing update last_update=%s pending=%d", since, self._reset_pending()
                )
                self._update(builder)
                return
            self._timer = threading.Timer(self._delay, self._delayed_update, args=(builder,))
            self._timer.daemon = True
            self._timer.start()

    def _delayed_update(self, builder: Any) -> None:
        with self._lock:
            self._log.info(
                "performing delayed update last_update=%s pending=%d",
                self._since_last(),
                self._reset_pending(),
            )
            self._update(builder)

    def _update(self, builder: Any) -> None:
        self._notifier.on_change(builder)
        self._last = self._clock()
        if self._metrics is not None:
            self._metrics.set_dag_rebuilt_metric(int(time.time()))