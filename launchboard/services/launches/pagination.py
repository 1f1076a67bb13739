"""
Infinite-scroll pagination over the base (pre-interleave) launch sequence.

The first batch is shown on construction (page 1). load_more() takes [page*B, (page+1)*B); an empty batch
ends the feed. At most one load runs at a time; calls while loading or after the end are no-ops.
Interleaving with boosted listings is applied per batch at render time, not here.
"""
from __future__ import annotations

import logging
from typing import Generic, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BATCH_SIZE = 10


def page_bounds(page: int, batch_size: int = DEFAULT_BATCH_SIZE) -> tuple[int, int]:
    """[start, end) of 1-indexed page."""
    start = (max(1, page) - 1) * batch_size
    return start, start + batch_size


def page_slice(items: Sequence[T], page: int, batch_size: int = DEFAULT_BATCH_SIZE) -> tuple[list[T], bool]:
    """Batch for a page plus whether more items follow it."""
    start, end = page_bounds(page, batch_size)
    return list(items[start:end]), end < len(items)


class FeedPaginator(Generic[T]):
    def __init__(self, items: Sequence[T], batch_size: int = DEFAULT_BATCH_SIZE):
        self._items = list(items)
        self.batch_size = max(1, batch_size)
        first = self._items[: self.batch_size]
        self.batches: list[list[T]] = [first] if first else []
        self.page = 1
        self.has_more = len(self._items) > self.batch_size
        self.loading = False

    @property
    def displayed(self) -> list[T]:
        return [item for batch in self.batches for item in batch]

    def load_more(self) -> list[T]:
        """Append the next batch. Returns the batch (empty when nothing was loaded)."""
        if not self.has_more or self.loading:
            return []
        self.loading = True
        try:
            start = self.page * self.batch_size
            end = start + self.batch_size
            batch = self._items[start:end]
            if not batch:
                self.has_more = False
                return []
            self.batches.append(batch)
            self.page += 1
            self.has_more = end < len(self._items)
            logger.debug("Loaded page %s (%s items); has_more=%s", self.page, len(batch), self.has_more)
            return batch
        finally:
            self.loading = False
