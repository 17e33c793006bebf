"""Lazily sampled process telemetry.

CPU and memory are refreshed only while traffic flows: ``exec()`` calls
``refresh_if_stale()`` and a new sample is taken once the interval has
elapsed. There is no background timer, so an idle process is never kept
awake by the router.
"""

import logging
import threading
import time

import psutil

logger = logging.getLogger("ctxrouter.stats")


class ProcessStats:
    """CPU percent and resident memory (MB) of the current process.

    Both read ``-1`` until the first sample.
    """

    __slots__ = ("_lock", "_next_at", "_process", "cpu", "interval", "mem")

    def __init__(self, interval: float = 5.0) -> None:
        self.interval = interval
        self.cpu: float = -1
        self.mem: float = -1
        self._next_at = 0.0
        self._process: psutil.Process | None = None
        self._lock = threading.Lock()

    def refresh_if_stale(self, now: float | None = None) -> bool:
        """Sample if the refresh interval has elapsed. Returns True if sampled."""
        now = time.monotonic() if now is None else now
        if now < self._next_at:
            return False
        with self._lock:
            if now < self._next_at:
                return False
            self._next_at = now + self.interval
            self._sample()
        return True

    def _sample(self) -> None:
        try:
            if self._process is None:
                self._process = psutil.Process()
                # First call primes the CPU counter and always reports 0.0
                self._process.cpu_percent(interval=None)
            self.cpu = round(self._process.cpu_percent(interval=None), 2)
            self.mem = round(self._process.memory_info().rss / 1024 / 1024)
        except psutil.Error as exc:
            logger.debug("Process stats unavailable: %s", exc)
