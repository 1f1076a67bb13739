"""
Interleave boosted listings into the regular sequence.

spacing = max(R // B, 2). Walk regular; after every spacing-th item (1-indexed) place the next boosted item.
When the walk runs out of slots (B > R // spacing) the boosted tier is spread proportionally instead:
boosted j goes after regular floor((j + 1) * R / B). Both tiers keep their order, and two boosted items
are only adjacent when B > R.
"""
from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")

MIN_SPACING = 2


def boosted_spacing(regular_count: int, boosted_count: int) -> int:
    if boosted_count <= 0:
        return 0
    return max(regular_count // boosted_count, MIN_SPACING)


def _spread(regular: Sequence[T], boosted: Sequence[T]) -> list[T]:
    r, b = len(regular), len(boosted)
    result: list[T] = []
    j = 0
    for slot in range(r + 1):
        if slot:
            result.append(regular[slot - 1])
        while j < b and (j + 1) * r // b == slot:
            result.append(boosted[j])
            j += 1
    return result


def interleave_boosted(regular: Sequence[T], boosted: Sequence[T]) -> list[T]:
    """Merge boosted into regular. Both inputs are expected to be rotated already."""
    if not boosted:
        return list(regular)
    if not regular:
        return list(boosted)

    spacing = boosted_spacing(len(regular), len(boosted))
    if len(regular) // spacing < len(boosted):
        return _spread(regular, boosted)

    result: list[T] = []
    placed = 0
    for i, item in enumerate(regular):
        result.append(item)
        if (i + 1) % spacing == 0 and placed < len(boosted):
            result.append(boosted[placed])
            placed += 1
    return result
