"""
Upvote toggle: one transaction of conditional statements, never read-then-write from cached state.

1. DELETE the (startup, user) row. If a row went away this is an un-vote (delta -1).
2. Otherwise INSERT it (unique per pair) and delta is +1.
3. UPDATE startups SET upvotes = upvotes + delta (atomic field transform in the store).
Set membership and counter change in the same commit, so upvotes == |upvoted_by| holds.
A concurrent toggle by the same user loses the unique-constraint race and is retried once.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from launchboard.core.constants import STATUS_APPROVED
from launchboard.core.errors import AuthRequiredError, NotFoundError, StoreWriteError
from launchboard.models.startup import Startup
from launchboard.models.startup_upvote import StartupUpvote

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2


@dataclass(frozen=True)
class UpvoteResult:
    startup_id: str
    upvotes: int
    upvoted: bool


def _apply_toggle(db: Session, startup_id: str, user_id: str) -> UpvoteResult:
    removed = (
        db.query(StartupUpvote)
        .filter(StartupUpvote.startup_id == startup_id, StartupUpvote.user_id == user_id)
        .delete(synchronize_session=False)
    )
    if removed:
        delta = -1
    else:
        db.add(StartupUpvote(startup_id=startup_id, user_id=user_id))
        db.flush()
        delta = 1
    db.query(Startup).filter(Startup.id == startup_id).update(
        {Startup.upvotes: Startup.upvotes + delta}, synchronize_session=False
    )
    db.commit()
    upvotes = db.query(Startup.upvotes).filter(Startup.id == startup_id).scalar() or 0
    return UpvoteResult(startup_id=startup_id, upvotes=upvotes, upvoted=delta > 0)


def toggle_upvote(db: Session, startup_id: str, user_id: str | None) -> UpvoteResult:
    """
    Vote if the user hasn't, un-vote if they have. Returns the authoritative post-state.
    Raises AuthRequiredError before touching the store when user_id is missing.
    """
    if not user_id:
        raise AuthRequiredError()
    exists = (
        db.query(Startup.id)
        .filter(Startup.id == startup_id, Startup.status == STATUS_APPROVED)
        .first()
    )
    if exists is None:
        raise NotFoundError(f"Launch {startup_id} not found")

    for attempt in range(1, MAX_ATTEMPTS + 1):
        try:
            result = _apply_toggle(db, startup_id, user_id)
            logger.info("Upvote toggled: startup=%s upvoted=%s upvotes=%s", startup_id, result.upvoted, result.upvotes)
            return result
        except IntegrityError:
            db.rollback()
            if attempt == MAX_ATTEMPTS:
                logger.exception("Upvote toggle kept conflicting for startup=%s", startup_id)
                raise StoreWriteError(f"Upvote conflict on {startup_id}")
            logger.info("Upvote toggle raced for startup=%s; retrying", startup_id)
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Upvote toggle failed for startup=%s", startup_id)
            raise StoreWriteError(str(e)) from e
    raise StoreWriteError(f"Upvote toggle did not complete for {startup_id}")


class OptimisticUpvote:
    """
    Client-side prediction for one listing's upvote button.

    predict() flips the visible state immediately; reconcile() replaces it with the store's answer;
    rollback() restores the pre-click state when the write fails.
    """

    def __init__(self, upvotes: int, upvoted: bool):
        self.upvotes = upvotes
        self.upvoted = upvoted
        self._before: tuple[int, bool] | None = None

    @property
    def pending(self) -> bool:
        return self._before is not None

    def predict(self) -> None:
        if self.pending:
            return
        self._before = (self.upvotes, self.upvoted)
        self.upvotes += -1 if self.upvoted else 1
        self.upvoted = not self.upvoted

    def reconcile(self, result: UpvoteResult) -> None:
        self.upvotes = result.upvotes
        self.upvoted = result.upvoted
        self._before = None

    def rollback(self) -> None:
        if self._before is not None:
            self.upvotes, self.upvoted = self._before
            self._before = None
