"""
Live rotation ticker: one per process, started from the app lifespan.

The ticker's size is the number of eligible regular listings at startup. Later changes to that
count are applied with set_size() (no resync), so the live index can drift from rotation_index().
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import or_

from launchboard.config import settings
from launchboard.core.constants import LISTING_REGULAR, ROTATION_JOB_ID, STATUS_APPROVED
from launchboard.db.session import SessionLocal
from launchboard.models.startup import Startup
from launchboard.services.launches.rotation import RotationTicker

logger = logging.getLogger(__name__)

_ticker: RotationTicker | None = None


def count_regular_listings(db, now: datetime | None = None) -> int:
    """Approved regular listings whose launch date has passed (the rotated pool size)."""
    now = now or datetime.now(timezone.utc)
    return (
        db.query(Startup)
        .filter(
            Startup.status == STATUS_APPROVED,
            Startup.scheduled_launch_date.isnot(None),
            Startup.scheduled_launch_date <= now,
            or_(Startup.listing_type.is_(None), Startup.listing_type == LISTING_REGULAR),
        )
        .count()
    )


def start_rotation_ticker(scheduler) -> RotationTicker:
    """Create the process ticker on scheduler and align it to the next window boundary."""
    global _ticker
    db = SessionLocal()
    try:
        size = count_regular_listings(db)
    except Exception as e:
        logger.warning("Could not count regular listings for rotation ticker: %s", e, exc_info=True)
        size = 0
    finally:
        db.close()
    _ticker = RotationTicker(
        window_seconds=settings.rotation_window_seconds,
        scheduler=scheduler,
        job_id=ROTATION_JOB_ID,
    )
    _ticker.resync(size)
    return _ticker


def get_rotation_ticker() -> RotationTicker | None:
    return _ticker


def update_rotation_size(size: int) -> None:
    if _ticker is not None:
        _ticker.set_size(size)
