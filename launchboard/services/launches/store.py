"""
Fetch & normalize approved startups into Listing records.

One query for approved startups with a launch date, one batch query (IN) for their upvoters.
Results are cached per process through ReadThroughCache under CACHE_KEY_APPROVED_LAUNCHES.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from launchboard.core.constants import (
    CACHE_KEY_APPROVED_LAUNCHES,
    DEFAULT_CATEGORY,
    LISTING_REGULAR,
    LISTING_TYPES,
    STATUS_APPROVED,
)
from launchboard.core.errors import MSG_NO_DATA, MSG_STALE_DATA
from launchboard.models.startup import Startup
from launchboard.models.startup_upvote import StartupUpvote
from launchboard.services.cache import ReadThroughCache
from launchboard.services.launches.types import Listing

logger = logging.getLogger(__name__)


def as_utc(dt: datetime) -> datetime:
    """SQLite drops tzinfo; stored instants are UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def fetch_upvoters(db: Session, startup_ids: list[str]) -> dict[str, set[str]]:
    """startup_id -> set of user ids, for a batch of startups."""
    by_startup: dict[str, set[str]] = defaultdict(set)
    if not startup_ids:
        return by_startup
    rows = (
        db.query(StartupUpvote.startup_id, StartupUpvote.user_id)
        .filter(StartupUpvote.startup_id.in_(startup_ids))
        .all()
    )
    for startup_id, user_id in rows:
        by_startup[startup_id].add(user_id)
    return by_startup


def to_listing(row: Startup, upvoted_by: set[str] | frozenset[str] = frozenset()) -> Listing:
    listing_type = row.listing_type if row.listing_type in LISTING_TYPES else LISTING_REGULAR
    return Listing(
        id=row.id,
        name=row.name,
        description=row.description or "",
        website=row.url,
        logo=row.logo_url,
        category=row.category or DEFAULT_CATEGORY,
        listing_type=listing_type,
        launch_date=as_utc(row.scheduled_launch_date),
        upvotes=row.upvotes or 0,
        upvoted_by=frozenset(upvoted_by),
        do_follow_backlink=bool(row.do_follow_backlink),
    )


def fetch_approved_listings(db: Session) -> list[Listing]:
    """All approved startups with a scheduled launch date, in store order (created_at, id)."""
    rows = (
        db.query(Startup)
        .filter(Startup.status == STATUS_APPROVED, Startup.scheduled_launch_date.isnot(None))
        .order_by(Startup.created_at.asc(), Startup.id.asc())
        .all()
    )
    upvoters = fetch_upvoters(db, [r.id for r in rows])
    listings = [to_listing(r, upvoters.get(r.id, set())) for r in rows]
    logger.debug("Fetched %s approved listings", len(listings))
    return listings


def get_approved_listings(db: Session, cache: ReadThroughCache) -> list[Listing]:
    """
    Cached approved listings. A failed refresh serves the stale snapshot when one exists;
    with no snapshot the store error propagates.
    """
    return cache.get(CACHE_KEY_APPROVED_LAUNCHES, lambda: fetch_approved_listings(db))


def load_listings(db: Session, cache: ReadThroughCache) -> tuple[list[Listing], str | None]:
    """
    Listings plus a user-facing notice when the data is degraded.
    Never raises on store-read failure: stale snapshot if any, else [].
    """
    try:
        result = cache.lookup(CACHE_KEY_APPROVED_LAUNCHES, lambda: fetch_approved_listings(db))
    except Exception as e:
        logger.warning("Launch fetch failed with no cached snapshot: %s", e, exc_info=True)
        return [], MSG_NO_DATA
    return result.data, (MSG_STALE_DATA if result.stale else None)
