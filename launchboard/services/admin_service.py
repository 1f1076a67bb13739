"""
Admin: review queue, approve/reject transitions, dashboard stats.

Approve (also used to re-approve a rejected startup): status=approved plus listing_type,
do_follow_backlink and scheduled_launch_date. Regular listings not launched immediately are scheduled
for next Sunday 00:00 local; boosted/premium/immediate launch now.
Reject (also re-rejects an approved startup): status=rejected; other fields are left as they were.
Every transition clears the public launches cache and the owner's submission views.
"""
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from launchboard.core.constants import (
    CACHE_KEY_APPROVED_LAUNCHES,
    LISTING_REGULAR,
    LISTING_TYPES,
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_REJECTED,
    SUBMISSION_STATUSES,
    submissions_cache_prefix,
)
from launchboard.core.errors import MSG_NO_SUBMISSIONS, NotFoundError, StoreWriteError, SubmissionValidationError
from launchboard.models.admin import Admin
from launchboard.models.startup import Startup
from launchboard.models.user import User
from launchboard.services.cache import ReadThroughCache
from launchboard.services.launches.leaderboard import next_sunday
from launchboard.services.submission_service import serialize_submission

logger = logging.getLogger(__name__)


def fetch_submissions_by_status(db: Session, status: str) -> list[dict[str, Any]]:
    """Pending/rejected in store order; approved newest launch date first."""
    q = db.query(Startup).filter(Startup.status == status)
    if status == STATUS_APPROVED:
        q = q.order_by(Startup.scheduled_launch_date.desc())
    else:
        q = q.order_by(Startup.created_at.asc())
    return [serialize_submission(r) for r in q.all()]


def list_submissions_by_status(db: Session, status: str) -> tuple[list[dict[str, Any]], str | None]:
    """Review queue for one status plus a notice. A failed store read gives an empty queue, not an error."""
    if status not in SUBMISSION_STATUSES:
        raise SubmissionValidationError({"status": f"Unknown status: {status}"})
    try:
        return fetch_submissions_by_status(db, status), None
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Review queue fetch failed for status=%s: %s", status, e)
        return [], MSG_NO_SUBMISSIONS


def scheduled_launch_for(listing_type: str, immediate: bool, now: datetime | None = None) -> datetime:
    now = now or datetime.now().astimezone()
    if listing_type == LISTING_REGULAR and not immediate:
        return next_sunday(now)
    return now


def _get_startup(db: Session, startup_id: str) -> Startup:
    row = db.query(Startup).filter(Startup.id == startup_id).first()
    if row is None:
        raise NotFoundError(f"Submission {startup_id} not found")
    return row


def _commit_transition(db: Session, cache: ReadThroughCache, row: Startup, action: str) -> dict[str, Any]:
    try:
        db.commit()
        db.refresh(row)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("%s failed for startup=%s", action, row.id)
        raise StoreWriteError(str(e)) from e
    cache.invalidate(CACHE_KEY_APPROVED_LAUNCHES)
    cache.invalidate_prefix(submissions_cache_prefix(row.user_id))
    return serialize_submission(row)


def approve_submission(
    db: Session,
    cache: ReadThroughCache,
    startup_id: str,
    listing_type: str = LISTING_REGULAR,
    do_follow_backlink: bool = True,
    immediate: bool = False,
    now: datetime | None = None,
) -> dict[str, Any]:
    if listing_type not in LISTING_TYPES:
        raise SubmissionValidationError({"listing_type": f"Unknown listing type: {listing_type}"})
    row = _get_startup(db, startup_id)
    previous = row.status
    row.status = STATUS_APPROVED
    row.listing_type = listing_type
    row.do_follow_backlink = do_follow_backlink
    row.scheduled_launch_date = scheduled_launch_for(listing_type, immediate, now).astimezone(timezone.utc)
    out = _commit_transition(db, cache, row, "approve")
    logger.info(
        "Startup approved: id=%s from=%s listing_type=%s launch=%s",
        startup_id, previous, listing_type, out["scheduled_launch_date"],
    )
    return out


def reject_submission(db: Session, cache: ReadThroughCache, startup_id: str) -> dict[str, Any]:
    row = _get_startup(db, startup_id)
    previous = row.status
    row.status = STATUS_REJECTED
    out = _commit_transition(db, cache, row, "reject")
    logger.info("Startup rejected: id=%s from=%s", startup_id, previous)
    return out


def dashboard_stats(db: Session) -> dict[str, int]:
    """Total users, total submissions, total upvotes across approved launches."""
    total_upvotes = (
        db.query(func.coalesce(func.sum(Startup.upvotes), 0))
        .filter(Startup.status == STATUS_APPROVED)
        .scalar()
    )
    by_status = dict(db.query(Startup.status, func.count(Startup.id)).group_by(Startup.status).all())
    return {
        "total_users": db.query(func.count(User.id)).scalar() or 0,
        "total_submissions": db.query(func.count(Startup.id)).scalar() or 0,
        "total_upvotes": int(total_upvotes or 0),
        "pending": by_status.get(STATUS_PENDING, 0),
        "approved": by_status.get(STATUS_APPROVED, 0),
        "rejected": by_status.get(STATUS_REJECTED, 0),
    }


def grant_admin(db: Session, user_id: str) -> bool:
    """Add user_id to admins. Returns False when it already was one."""
    if db.query(Admin.user_id).filter(Admin.user_id == user_id).first() is not None:
        return False
    db.add(Admin(user_id=user_id))
    db.commit()
    logger.info("Admin granted: user=%s", user_id)
    return True
