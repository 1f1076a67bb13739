"""
Fair-exposure rotation for the regular tier.

- rotation_index(t) = floor(t / W) mod max(1, N): a pure function of wall-clock time, so every
  client computing it inside the same W-second window sees the same order. No coordination needed.
- rotate(S, i) = S[i:] + S[:i]. Each rendered item gets a key "{id}-{index}-{position}" so list
  identity changes every window even when the order repeats.
- RotationTicker is the in-process live counter: first tick at the next window boundary, then every W,
  advancing its own index by 1 (mod N) without reading the clock. Changing its size without resync()
  lets it drift from rotation_index(); that divergence is known and left as is.
"""
from __future__ import annotations

import logging
import math
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Sequence, TypeVar

from launchboard.core.constants import ROTATION_JOB_ID

logger = logging.getLogger(__name__)

T = TypeVar("T")

ROTATION_WINDOW_SECONDS = 600


def rotation_index(now_ts: float, window_seconds: float = ROTATION_WINDOW_SECONDS, size: int = 0) -> int:
    """Index for the window containing now_ts (epoch seconds) over a sequence of `size` items."""
    return int(math.floor(now_ts / window_seconds)) % max(1, size)


def seconds_until_next_window(now_ts: float, window_seconds: float = ROTATION_WINDOW_SECONDS) -> float:
    """ceil(t/W)*W - t. Zero exactly on a boundary."""
    return math.ceil(now_ts / window_seconds) * window_seconds - now_ts


def next_window_start(now_ts: float, window_seconds: float = ROTATION_WINDOW_SECONDS) -> datetime:
    return datetime.fromtimestamp(now_ts + seconds_until_next_window(now_ts, window_seconds), tz=timezone.utc)


def rotate(items: Sequence[T], index: int) -> list[T]:
    """items[index:] + items[:index], index taken mod len(items) so a shared index fits any length."""
    if not items:
        return []
    i = index % len(items)
    return list(items[i:]) + list(items[:i])


def render_key(item_id: str, index: int, position: int) -> str:
    return f"{item_id}-{index}-{position}"


def rotate_with_keys(items: Sequence[T], index: int, id_of: Callable[[T], str]) -> list[tuple[str, T]]:
    """Rotate and tag each item with its render key (position is after rotation)."""
    return [(render_key(id_of(item), index, pos), item) for pos, item in enumerate(rotate(items, index))]


class RotationTicker:
    """
    Live rotation counter driven by a scheduler (APScheduler-compatible: add_job / remove_job).

    resync(size) recomputes the index from the clock and (re)schedules the job so it fires at the next
    window boundary and every window after. set_size(size) only changes the modulus used by later ticks.
    """

    def __init__(
        self,
        window_seconds: float = ROTATION_WINDOW_SECONDS,
        clock: Callable[[], float] | None = None,
        scheduler=None,
        job_id: str = ROTATION_JOB_ID,
    ):
        self.window_seconds = window_seconds
        self._clock = clock or time.time
        self._scheduler = scheduler
        self._job_id = job_id
        self.size = 0
        self.index = 0
        self.next_tick_at: datetime | None = None

    def resync(self, size: int | None = None) -> int:
        """Recompute index from wall-clock and reschedule the timer. Returns the new index."""
        if size is not None:
            self.size = size
        now_ts = self._clock()
        self.index = rotation_index(now_ts, self.window_seconds, self.size)
        self.next_tick_at = next_window_start(now_ts, self.window_seconds)
        if self._scheduler is not None:
            if self._scheduler.get_job(self._job_id) is not None:
                self._scheduler.remove_job(self._job_id)
            self._scheduler.add_job(
                self.tick,
                "interval",
                seconds=self.window_seconds,
                start_date=self.next_tick_at,
                id=self._job_id,
            )
        logger.info("Rotation ticker resynced: index=%s size=%s next_tick_at=%s", self.index, self.size, self.next_tick_at.isoformat())
        return self.index

    def set_size(self, size: int) -> None:
        """Update the modulus for later ticks. Does not recompute the index (see module docstring)."""
        if size != self.size:
            logger.debug("Rotation ticker size %s -> %s (no resync)", self.size, size)
        self.size = size

    def tick(self) -> int:
        """Advance by one window: (index + 1) mod max(1, size)."""
        self.index = (self.index + 1) % max(1, self.size)
        if self.next_tick_at is not None:
            self.next_tick_at = self.next_tick_at + timedelta(seconds=self.window_seconds)
        return self.index

    def cancel(self) -> None:
        if self._scheduler is not None and self._scheduler.get_job(self._job_id) is not None:
            self._scheduler.remove_job(self._job_id)
        self.next_tick_at = None
