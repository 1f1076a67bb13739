"""
Weekly leaderboard and Sunday-aligned week bounds (server local time).

Last week = the 7 days before the current week's Sunday 00:00, inclusive of 23:59:59.999 on Saturday.
Top N by upvotes, stable on ties (fetch order wins), ranks 1..N annotated.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from launchboard.services.launches.types import Listing

LEADERBOARD_SIZE = 3
_END_OF_DAY = dict(hour=23, minute=59, second=59, microsecond=999000)


def _local(now: datetime | None) -> datetime:
    """now converted to server local time. Naive inputs are taken as local already."""
    if now is None:
        return datetime.now().astimezone()
    return now.astimezone()


def week_start(now: datetime | None = None) -> datetime:
    """Sunday 00:00:00.000 of the week containing now."""
    local = _local(now)
    days_since_sunday = (local.weekday() + 1) % 7
    start = local - timedelta(days=days_since_sunday)
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


def current_week_bounds(now: datetime | None = None) -> tuple[datetime, datetime]:
    start = week_start(now)
    end = (start + timedelta(days=6)).replace(**_END_OF_DAY)
    return start, end


def last_week_bounds(now: datetime | None = None) -> tuple[datetime, datetime]:
    start = week_start(now) - timedelta(days=7)
    end = (start + timedelta(days=6)).replace(**_END_OF_DAY)
    return start, end


def next_sunday(now: datetime | None = None) -> datetime:
    """Sunday 00:00 after now (a week out when now is already Sunday). Default launch slot for regular listings."""
    return week_start(now) + timedelta(days=7)


def launched_between(listings: Iterable[Listing], start: datetime, end: datetime) -> list[Listing]:
    return [l for l in listings if start <= l.launch_date <= end]


def weekly_leaderboard(
    listings: Iterable[Listing],
    now: datetime | None = None,
    limit: int = LEADERBOARD_SIZE,
) -> list[tuple[int, Listing]]:
    """[(rank, listing)] for last week's top `limit` by upvotes."""
    start, end = last_week_bounds(now)
    candidates = launched_between(listings, start, end)
    top = sorted(candidates, key=lambda l: l.upvotes, reverse=True)[:limit]
    return [(rank, listing) for rank, listing in enumerate(top, start=1)]
