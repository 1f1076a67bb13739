"""
Launches: approved startups as a rotating, tiered public feed.

- store: fetch approved startups + upvoters, normalize to Listing, cache reads.
- rotation: time-bucketed rotation index (10-minute windows) and the live RotationTicker.
- interleave: boosted listings spread through the regular sequence.
- pagination: batches of 10 for infinite scroll.
- leaderboard: last week's top 3 by upvotes.
- feed: composes the above into API-ready segments.
"""

from launchboard.services.launches.feed import build_launch_feed, build_weekly_launches, partition_tiers
from launchboard.services.launches.leaderboard import weekly_leaderboard
from launchboard.services.launches.store import get_approved_listings, load_listings
from launchboard.services.launches.types import Listing

__all__ = [
    "Listing",
    "build_launch_feed",
    "build_weekly_launches",
    "get_approved_listings",
    "load_listings",
    "partition_tiers",
    "weekly_leaderboard",
]
