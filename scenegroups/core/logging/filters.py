# scenegroups/core/logging/filters.py
from __future__ import annotations
import logging
import time
import threading
from collections import deque, defaultdict
from collections.abc import Callable

__all__ = ["RecurringSuppressFilter"]

# Upper bound for normalized message keys
MAX_KEY_LEN = 512



class RecurringSuppressFilter(logging.Filter):
    """
    Suppresses recurring identical log messages after `maxPerWindow` occurrences
    within a sliding `windowSeconds`. Emits a summary once the window slides and
    logging resumes for that key.

    Key = (logger name, levelno, normalized message)

    Poll loops log a line per tick; this keeps a slow load from burying
    everything else on the console.
    """
    def __init__(
            self,
            *,
            windowSeconds: int = 60,
            maxPerWindow: int = 5,
            summaryLevel: int = logging.INFO,
            normalize: Callable[[logging.LogRecord], str] | None = None,
            clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__()
        self.windowSeconds = max(1, int(windowSeconds))
        self.maxPerWindow = max(1, int(maxPerWindow))
        self.summaryLevel = int(summaryLevel)
        self.normalize = normalize or self._defaultNormalize
        self._clock = clock

        self._buckets: dict[tuple[str, int, str], deque[float]] = defaultdict(deque)
        # Suppressed count not yet reported
        self._suppressedCounts: dict[tuple[str, int, str], int] = defaultdict(int)
        self._lock = threading.Lock()

    def _defaultNormalize(self, record: logging.LogRecord) -> str:
        norm = " ".join(str(record.getMessage()).split())
        if len(norm) > MAX_KEY_LEN:
            norm = norm[:MAX_KEY_LEN] + "..."
        return norm

    def _keyOf(self, record: logging.LogRecord) -> tuple[str, int, str]:
        return (record.name, record.levelno, self.normalize(record))

    def _pruneOld(self, dq: deque[float], now: float) -> None:
        limit = now - self.windowSeconds
        while dq and dq[0] < limit:
            dq.popleft()

    def _emitSummary(self, key: tuple[str, int, str]) -> None:
        suppressedCount = self._suppressedCounts.get(key, 0)
        if suppressedCount <= 0:
            return
        loggerName, _levelno, normMessage = key
        self._suppressedCounts[key] = 0
        # Marked so this filter lets it through
        logging.getLogger(loggerName).log(
            self.summaryLevel,
            "Suppressed %d repeated logs: %s",
            suppressedCount,
            normMessage,
            extra={"_noRecurringSuppress": True},
        )

    def suppressedCount(self, record: logging.LogRecord) -> int:
        return self._suppressedCounts.get(self._keyOf(record), 0)

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "_noRecurringSuppress", False):
            return True

        now = self._clock()
        key = self._keyOf(record)
        emitSummary = False

        with self._lock:
            dq = self._buckets[key]
            self._pruneOld(dq, now)
            dq.append(now)

            if len(dq) <= self.maxPerWindow:
                emitSummary = self._suppressedCounts.get(key, 0) > 0
                allowed = True
            else:
                self._suppressedCounts[key] += 1
                allowed = False

        # Summary is logged outside the lock; it re-enters filter()
        if emitSummary:
            self._emitSummary(key)
        return allowed
