"""
Sort Progress

Counts comparisons during one sort run and periodically logs an ETA.
The estimate is advisory; it never affects the sort.
"""

import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_LOG_INTERVAL = 60 * 5  # 5 minutes


def format_duration(seconds: float) -> str:
    """Format seconds as "1h:02m:03s" or "2m:05s"."""
    if seconds < 0:
        return "0:00"
    total = int(round(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}h:{minutes:02d}m:{secs:02d}s"
    return f"{minutes}m:{secs:02d}s"


class SortProgress:
    """Progress state for a single sort invocation."""

    def __init__(
        self,
        total: int,
        log_interval: float = DEFAULT_LOG_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.total = total
        self.log_interval = log_interval
        self._clock = clock
        self.completed = 0
        self.started_at = clock()
        self.last_log_at = self.started_at

    @property
    def elapsed(self) -> float:
        return self._clock() - self.started_at

    @property
    def remaining(self) -> int:
        """Comparisons left according to the estimate (never negative)."""
        return max(self.total - self.completed, 0)

    def estimate_remaining_seconds(self) -> Optional[float]:
        """Mean time per comparison times comparisons left."""
        if self.completed == 0:
            return None
        return self.elapsed / self.completed * self.remaining

    def record(self) -> None:
        """Count one comparison and log progress if the interval has passed."""
        self.completed += 1
        now = self._clock()
        if now - self.last_log_at > self.log_interval:
            self.log()
            self.last_log_at = now

    def log(self) -> None:
        eta = self.estimate_remaining_seconds()
        logger.info(
            f"{self.completed} comparisons in {format_duration(self.elapsed)} | "
            f"comparisons left: {self.remaining} | "
            f"estimated time remaining: {format_duration(eta or 0)}"
        )
