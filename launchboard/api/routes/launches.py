"""
Public launches API: rotating feed, leaderboard, weekly launches, upvote toggle.

Reads go through the process ReadThroughCache. A failed store read never fails the request:
responses carry `notice` and either the stale snapshot or empty lists.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from launchboard.api.deps import get_cache, get_current_user_id, require_user
from launchboard.config import settings
from launchboard.core.constants import CACHE_KEY_APPROVED_LAUNCHES
from launchboard.core.errors import LaunchboardError, service_error_to_http
from launchboard.db.session import get_db
from launchboard.scheduler.rotation_job import get_rotation_ticker, update_rotation_size
from launchboard.services.cache import ReadThroughCache
from launchboard.services.launches import build_launch_feed, build_weekly_launches, load_listings, weekly_leaderboard
from launchboard.services.launches.leaderboard import last_week_bounds
from launchboard.services.launches.rotation import next_window_start, rotation_index
from launchboard.services.upvote_service import toggle_upvote

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/feed")
def get_feed(
    page: int = Query(1, ge=1),
    pinned_index: int | None = Query(None, ge=0, alias="rotation_index"),
    db: Session = Depends(get_db),
    cache: ReadThroughCache = Depends(get_cache),
    user_id: str | None = Depends(get_current_user_id),
) -> dict[str, Any]:
    """
    One page of the launch feed. Page 1 also carries premium listings.
    Items are keyed "{id}-{rotation_index}-{position}"; refetch at next_rotation_at to get the next order.
    Send page 1's rotation_index with later pages so scrolling across a window boundary neither skips nor
    repeats listings.
    """
    listings, notice = load_listings(db, cache)
    feed = build_launch_feed(
        listings,
        page=page,
        batch_size=settings.feed_batch_size,
        window_seconds=settings.rotation_window_seconds,
        user_id=user_id,
        leaderboard_size=settings.leaderboard_size,
        pinned_index=pinned_index,
    )
    update_rotation_size(feed["regular_total"])
    feed["notice"] = notice
    return feed


@router.get("/leaderboard")
def get_leaderboard(
    db: Session = Depends(get_db),
    cache: ReadThroughCache = Depends(get_cache),
    user_id: str | None = Depends(get_current_user_id),
) -> dict[str, Any]:
    """Last week's top listings by upvotes, ranked from 1."""
    listings, notice = load_listings(db, cache)
    start, end = last_week_bounds()
    leaders = weekly_leaderboard(listings, limit=settings.leaderboard_size)
    return {
        "week_starts_at": start.isoformat(),
        "week_ends_at": end.isoformat(),
        "leaderboard": [{"rank": rank, **l.to_dict(user_id)} for rank, l in leaders],
        "notice": notice,
    }


@router.get("/weekly")
def get_weekly_launches(
    db: Session = Depends(get_db),
    cache: ReadThroughCache = Depends(get_cache),
    user_id: str | None = Depends(get_current_user_id),
) -> dict[str, Any]:
    listings, notice = load_listings(db, cache)
    out = build_weekly_launches(listings, user_id=user_id)
    out["notice"] = notice
    return out


@router.get("/rotation")
def get_rotation_state() -> dict[str, Any]:
    """
    Rotation window state. `ticker` is the live in-process counter (null when not started);
    it can differ from `computed_index` after the pool size changed without a resync.
    """
    now_ts = time.time()
    ticker = get_rotation_ticker()
    size = ticker.size if ticker is not None else 0
    return {
        "window_seconds": settings.rotation_window_seconds,
        "now": datetime.fromtimestamp(now_ts, tz=timezone.utc).isoformat(),
        "computed_index": rotation_index(now_ts, settings.rotation_window_seconds, size),
        "next_rotation_at": next_window_start(now_ts, settings.rotation_window_seconds).isoformat(),
        "ticker": None
        if ticker is None
        else {
            "index": ticker.index,
            "size": ticker.size,
            "next_tick_at": ticker.next_tick_at.isoformat() if ticker.next_tick_at else None,
        },
    }


@router.post("/{startup_id}/upvote")
def post_upvote(
    startup_id: str,
    db: Session = Depends(get_db),
    cache: ReadThroughCache = Depends(get_cache),
    user_id: str = Depends(require_user),
) -> dict[str, Any]:
    """Toggle the caller's upvote. Returns the store's post-state for the client to reconcile with."""
    try:
        result = toggle_upvote(db, startup_id, user_id)
    except LaunchboardError as e:
        raise service_error_to_http(e)
    cache.invalidate(CACHE_KEY_APPROVED_LAUNCHES)
    return {"startup_id": result.startup_id, "upvotes": result.upvotes, "upvoted": result.upvoted}
