"""
Launch feed composition: ready-to-render segments so clients only draw.

1. Eligibility: premium/boosted always; regular once launch_date <= now.
2. Partition by tier, preserving fetch order.
3. Premium first, in full, unrotated.
4. Regular pool rotated by the shared time-bucketed index, then paginated (batches of 10).
5. Each batch interleaved with the rotated boosted pool independently.
6. Leaderboard: last week's top 3 by upvotes over all approved listings.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

from launchboard.core.constants import LISTING_BOOSTED, LISTING_PREMIUM
from launchboard.services.launches.interleave import interleave_boosted
from launchboard.services.launches.leaderboard import (
    LEADERBOARD_SIZE,
    current_week_bounds,
    launched_between,
    weekly_leaderboard,
)
from launchboard.services.launches.pagination import DEFAULT_BATCH_SIZE, page_slice
from launchboard.services.launches.rotation import (
    ROTATION_WINDOW_SECONDS,
    next_window_start,
    render_key,
    rotate,
    rotation_index,
)
from launchboard.services.launches.types import Listing


@dataclass
class Tiers:
    premium: list[Listing]
    boosted: list[Listing]
    regular: list[Listing]


def is_eligible(listing: Listing, now: datetime) -> bool:
    return listing.always_visible or listing.launch_date <= now


def eligible_listings(listings: Iterable[Listing], now: datetime) -> list[Listing]:
    return [l for l in listings if is_eligible(l, now)]


def partition_tiers(listings: Iterable[Listing]) -> Tiers:
    tiers = Tiers(premium=[], boosted=[], regular=[])
    for l in listings:
        if l.listing_type == LISTING_PREMIUM:
            tiers.premium.append(l)
        elif l.listing_type == LISTING_BOOSTED:
            tiers.boosted.append(l)
        else:
            tiers.regular.append(l)
    return tiers


def render_batch(regular_batch: list[Listing], boosted: list[Listing], index: int) -> list[dict[str, Any]]:
    """
    Interleave one batch with the rotated boosted pool. Render keys are position-in-batch based,
    so they change with the index even when the order repeats.
    """
    rotated_boosted = rotate(boosted, index)
    merged = interleave_boosted(regular_batch, rotated_boosted)
    return [{"key": render_key(l.id, index, pos), "listing": l} for pos, l in enumerate(merged)]


def _items_to_dicts(items: list[dict[str, Any]], user_id: str | None) -> list[dict[str, Any]]:
    return [{"key": it["key"], **it["listing"].to_dict(user_id)} for it in items]


def build_launch_feed(
    listings: list[Listing],
    now: datetime | None = None,
    page: int = 1,
    batch_size: int = DEFAULT_BATCH_SIZE,
    window_seconds: float = ROTATION_WINDOW_SECONDS,
    user_id: str | None = None,
    leaderboard_size: int = LEADERBOARD_SIZE,
    pinned_index: int | None = None,
) -> dict[str, Any]:
    """
    Build feed segments for one page.
    Returns:
      - premium: all eligible premium listings (page 1 only; later pages send [])
      - items: regular batch `page` of the rotated pool, with boosted interleaved
      - has_more: whether page + 1 has regular listings
      - regular_total: size of the rotated regular pool (N)
      - rotation_index / next_rotation_at: shared window state so clients refresh on the boundary
      - leaderboard: last week's top listings with rank
      - week_ends_at: end of the current week (countdown)
    pinned_index: rotation_index echoed from page 1. Later pages keep that window's order even after
    the boundary passes, so one scroll session sees every regular listing exactly once.
    """
    now = now or datetime.now(timezone.utc)
    now_ts = now.timestamp()
    tiers = partition_tiers(eligible_listings(listings, now))

    if pinned_index is None:
        index = rotation_index(now_ts, window_seconds, len(tiers.regular))
    else:
        index = pinned_index % max(1, len(tiers.regular))
    rotated_regular = rotate(tiers.regular, index)
    batch, has_more = page_slice(rotated_regular, page, batch_size)
    items = render_batch(batch, tiers.boosted, index)

    leaders = weekly_leaderboard(listings, now, leaderboard_size)
    _, week_end = current_week_bounds(now)

    return {
        "page": page,
        "premium": [l.to_dict(user_id) for l in tiers.premium] if page <= 1 else [],
        "items": _items_to_dicts(items, user_id),
        "has_more": has_more,
        "regular_total": len(tiers.regular),
        "rotation_index": index,
        "next_rotation_at": next_window_start(now_ts, window_seconds).isoformat(),
        "leaderboard": [{"rank": rank, **l.to_dict(user_id)} for rank, l in leaders],
        "week_ends_at": week_end.isoformat(),
    }


def build_weekly_launches(listings: list[Listing], now: datetime | None = None, user_id: str | None = None) -> dict[str, Any]:
    """Listings launched in the current Sunday-aligned week."""
    start, end = current_week_bounds(now)
    launched = launched_between(listings, start, end)
    return {
        "week_starts_at": start.isoformat(),
        "week_ends_at": end.isoformat(),
        "launches": [l.to_dict(user_id) for l in launched],
    }
