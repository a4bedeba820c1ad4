"""Delayed-callback scheduling port and its threading adapter.

The only guarantee assumed of a scheduler is "run no earlier than the delay,
at least once". Callbacks scheduled through it must therefore be idempotent.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


class SchedulerPort(Protocol):
    """Port for running a callback after a minimum delay."""

    def run_after(self, delay_ms: int, callback: Callable[..., Any], **kwargs: Any) -> None:
        ...


class ThreadingScheduler:
    """Runs callbacks on daemon ``threading.Timer`` threads.

    Timers do not survive a restart; announcements still pending then are
    re-delivered by ``reschedule_pending_announcements`` at web startup.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._timers: set[threading.Timer] = set()

    def run_after(self, delay_ms: int, callback: Callable[..., Any], **kwargs: Any) -> None:
        delay_seconds = max(0, delay_ms) / 1000.0

        def _run():
            try:
                callback(**kwargs)
            except Exception:
                logger.exception("Scheduled callback %s failed", getattr(callback, "__name__", callback))
            finally:
                with self._lock:
                    self._timers.discard(timer)

        timer = threading.Timer(delay_seconds, _run)
        timer.daemon = True
        with self._lock:
            self._timers.add(timer)
        timer.start()
        logger.info("Scheduled %s to run in %dms", getattr(callback, "__name__", callback), delay_ms)

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._timers)

    def join(self, timeout: float | None = None) -> None:
        """Wait for every pending timer to fire."""
        with self._lock:
            timers = list(self._timers)
        for timer in timers:
            timer.join(timeout)


__all__ = ["SchedulerPort", "ThreadingScheduler"]
