# modproxy/core/logging/filters.py
from __future__ import annotations
import logging
import time
import threading
from collections import deque, defaultdict

__all__ = ["RecurringSuppressFilter"]

MAX_KEY_LEN = 512
MAX_TRACKED_KEYS = 5000



class RecurringSuppressFilter(logging.Filter):
    """
    Suppresses identical log messages after `maxPerWindow` occurrences within a
    sliding `windowSeconds`. When logging resumes for that key, a summary with
    the number of dropped records is emitted first.

    Key = (logger name, levelno, whitespace-squashed message)

    A flaky origin makes the fetcher warn once per request, so this keeps the
    console readable while the game hammers the same failing URL.
    At most `maxKeys` distinct messages are tracked; every failing asset URL
    is its own key.
    """
    def __init__(
            self,
            *,
            windowSeconds: int = 60,
            maxPerWindow: int = 5,
            summaryLevel: int = logging.INFO,
            maxKeys: int = MAX_TRACKED_KEYS,
            clock=time.monotonic,
    ):
        super().__init__()
        self.windowSeconds = max(1, int(windowSeconds))
        self.maxPerWindow = max(1, int(maxPerWindow))
        self.summaryLevel = int(summaryLevel)
        self.maxKeys = max(1, int(maxKeys))
        self.lowWater = max(1, self.maxKeys * 4 // 5)
        self._clock = clock

        self._buckets: dict[tuple[str, int, str], deque[float]] = defaultdict(deque)
        self._suppressedCounts: dict[tuple[str, int, str], int] = defaultdict(int)
        self._lock = threading.Lock()

    def _keyOf(self, record: logging.LogRecord) -> tuple[str, int, str]:
        norm = " ".join(str(record.getMessage()).split())
        if len(norm) > MAX_KEY_LEN:
            norm = norm[:MAX_KEY_LEN] + "..."
        return (record.name, record.levelno, norm)

    def _pruneOld(self, dq: deque[float], now: float) -> None:
        limit = now - self.windowSeconds
        while dq and dq[0] < limit:
            dq.popleft()

    def _emitSummary(self, key: tuple[str, int, str], dropped: int) -> None:
        loggerName, _levelno, normMessage = key
        logging.getLogger(loggerName).log(
            self.summaryLevel,
            "Suppressed %d repeated logs: %s",
            dropped,
            normMessage,
            extra={"_noRecurringSuppress": True},
        )

    def _maybeCleanup(self, now: float) -> None:
        """
        Bound the number of tracked keys (called under the lock).
        Keys whose window went quiet are dropped first; if that is not enough
        the oldest keys go, down to `lowWater`.
        """
        if len(self._buckets) <= self.maxKeys:
            return

        for key in list(self._buckets):
            dq = self._buckets[key]
            self._pruneOld(dq, now)
            if not dq and not self._suppressedCounts.get(key, 0):
                del self._buckets[key]
                self._suppressedCounts.pop(key, None)

        excess = len(self._buckets) - self.lowWater
        if excess > 0:
            for key in list(self._buckets)[:excess]:
                del self._buckets[key]
                self._suppressedCounts.pop(key, None)

    def suppressedCount(self, record: logging.LogRecord) -> int:
        with self._lock:
            return self._suppressedCounts.get(self._keyOf(record), 0)

    def trackedKeys(self) -> int:
        with self._lock:
            return len(self._buckets)

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "_noRecurringSuppress", False):
            return True

        now = self._clock()
        key = self._keyOf(record)

        with self._lock:
            self._maybeCleanup(now)
            dq = self._buckets[key]
            self._pruneOld(dq, now)

            if len(dq) >= self.maxPerWindow:
                self._suppressedCounts[key] += 1
                dq.append(now)
                return False

            dq.append(now)
            dropped = self._suppressedCounts.pop(key, 0)

        # Outside the lock: the summary record passes through this filter again
        if dropped:
            self._emitSummary(key, dropped)
        return True
