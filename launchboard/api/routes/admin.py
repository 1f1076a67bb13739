"""Admin review: queue by status, approve/reject, dashboard stats. Every route requires an admin."""
import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from launchboard.api.deps import get_cache, require_admin
from launchboard.core.constants import LISTING_REGULAR, STATUS_PENDING
from launchboard.core.errors import LaunchboardError, service_error_to_http
from launchboard.db.session import get_db
from launchboard.services.admin_service import (
    approve_submission,
    dashboard_stats,
    list_submissions_by_status,
    reject_submission,
)
from launchboard.services.cache import ReadThroughCache

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/submissions")
def list_submissions(
    status: str = Query(STATUS_PENDING),
    db: Session = Depends(get_db),
    _admin: str = Depends(require_admin),
) -> dict[str, Any]:
    try:
        submissions, notice = list_submissions_by_status(db, status)
    except LaunchboardError as e:
        raise service_error_to_http(e)
    return {"status": status, "submissions": submissions, "notice": notice}


class ApproveBody(BaseModel):
    listing_type: str = Field(LISTING_REGULAR, pattern="^(regular|boosted|premium)$")
    do_follow_backlink: bool = True
    immediate: bool = Field(False, description="Launch now instead of next Sunday (regular listings)")


@router.post("/submissions/{startup_id}/approve")
def approve(
    startup_id: str,
    body: ApproveBody | None = None,
    db: Session = Depends(get_db),
    cache: ReadThroughCache = Depends(get_cache),
    admin_id: str = Depends(require_admin),
) -> dict[str, Any]:
    body = body or ApproveBody()
    try:
        out = approve_submission(
            db,
            cache,
            startup_id,
            listing_type=body.listing_type,
            do_follow_backlink=body.do_follow_backlink,
            immediate=body.immediate,
        )
    except LaunchboardError as e:
        raise service_error_to_http(e)
    logger.info("Approval by admin=%s for startup=%s", admin_id, startup_id)
    return out


@router.post("/submissions/{startup_id}/reject")
def reject(
    startup_id: str,
    db: Session = Depends(get_db),
    cache: ReadThroughCache = Depends(get_cache),
    admin_id: str = Depends(require_admin),
) -> dict[str, Any]:
    try:
        out = reject_submission(db, cache, startup_id)
    except LaunchboardError as e:
        raise service_error_to_http(e)
    logger.info("Rejection by admin=%s for startup=%s", admin_id, startup_id)
    return out


@router.get("/stats")
def stats(db: Session = Depends(get_db), _admin: str = Depends(require_admin)) -> dict[str, int]:
    return dashboard_stats(db)
