"""
Startup submissions: create (pending), list per user (cached), owner/admin edits.
"""
from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from launchboard.core.constants import (
    CACHE_KEY_APPROVED_LAUNCHES,
    CATEGORIES,
    DESCRIPTION_MAX_LENGTH,
    LOGO_PREFIX,
    STATUS_APPROVED,
    STATUS_PENDING,
    SUBMISSION_STATUSES,
    URL_PATTERN,
    submissions_cache_key,
    submissions_cache_prefix,
)
from launchboard.core.errors import (
    MSG_NO_SUBMISSIONS,
    MSG_STALE_SUBMISSIONS,
    AuthRequiredError,
    ForbiddenError,
    NotFoundError,
    StoreWriteError,
    SubmissionValidationError,
)
from launchboard.models.admin import Admin
from launchboard.models.startup import Startup
from launchboard.services.cache import ReadThroughCache
from launchboard.services.launches.store import as_utc
from launchboard.services.storage import BlobStore

logger = logging.getLogger(__name__)

# Fields an owner (or admin) may edit. Upvote fields change only through the toggle.
EDITABLE_FIELDS = ("name", "url", "social_handle", "description", "category")

_SAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass
class UploadedImage:
    filename: str
    content_type: str | None
    data: bytes


def validate_image(image: UploadedImage | None, max_bytes: int, field: str = "logo") -> dict[str, str]:
    if image is None or not image.data:
        return {field: "Logo is required" if field == "logo" else "Image is required"}
    if len(image.data) > max_bytes:
        return {field: f"File must be less than {max_bytes // 1024}KB"}
    if not (image.content_type or "").startswith("image/"):
        return {field: "Please upload an image file"}
    return {}


def validate_submission_fields(fields: dict[str, Any], partial: bool = False) -> dict[str, str]:
    """field -> message for every invalid field. partial=True skips fields that are absent."""
    errors: dict[str, str] = {}

    def present(key: str) -> bool:
        return not partial or key in fields

    name = (fields.get("name") or "").strip()
    if present("name") and not name:
        errors["name"] = "Startup name is required"
    url = (fields.get("url") or "").strip()
    if present("url"):
        if not url:
            errors["url"] = "Website URL is required"
        elif not re.match(URL_PATTERN, url):
            errors["url"] = "Please enter a valid URL starting with http:// or https://"
    if present("social_handle") and not (fields.get("social_handle") or "").strip():
        errors["social_handle"] = "Social media handle is required"
    description = (fields.get("description") or "").strip()
    if present("description"):
        if not description:
            errors["description"] = "Description is required"
        elif len(description) > DESCRIPTION_MAX_LENGTH:
            errors["description"] = f"Description must be less than {DESCRIPTION_MAX_LENGTH} characters"
    if present("category") and fields.get("category") not in CATEGORIES:
        errors["category"] = "Please select a category"
    return errors


def logo_path(filename: str, now_ms: int | None = None) -> str:
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    safe = _SAFE_FILENAME.sub("_", filename or "logo").strip("._") or "logo"
    return f"{LOGO_PREFIX}/{now_ms}_{safe}"


def serialize_submission(row: Startup) -> dict[str, Any]:
    return {
        "id": row.id,
        "name": row.name,
        "url": row.url,
        "social_handle": row.social_handle,
        "description": row.description,
        "category": row.category,
        "logo_url": row.logo_url,
        "user_id": row.user_id,
        "status": row.status,
        "listing_type": row.listing_type,
        "do_follow_backlink": bool(row.do_follow_backlink),
        "upvotes": row.upvotes or 0,
        "submitted_at": as_utc(row.created_at).isoformat() if row.created_at else None,
        "scheduled_launch_date": as_utc(row.scheduled_launch_date).isoformat() if row.scheduled_launch_date else None,
    }


def create_submission(
    db: Session,
    blob_store: BlobStore,
    cache: ReadThroughCache,
    user_id: str | None,
    fields: dict[str, Any],
    logo: UploadedImage | None,
    max_logo_bytes: int,
) -> dict[str, Any]:
    """
    Validate, upload the logo, then insert the startup as pending.
    Auth is checked first; nothing is uploaded or written for invalid input.
    """
    if not user_id:
        raise AuthRequiredError()
    errors = validate_submission_fields(fields)
    errors.update(validate_image(logo, max_logo_bytes))
    if errors:
        raise SubmissionValidationError(errors)

    path = logo_path(logo.filename)
    blob_store.upload(path, logo.data, logo.content_type)
    logo_url = blob_store.download_url(path)

    row = Startup(
        user_id=user_id,
        name=fields["name"].strip(),
        url=fields["url"].strip(),
        social_handle=fields["social_handle"].strip(),
        description=fields["description"].strip(),
        category=fields["category"],
        logo_url=logo_url,
        status=STATUS_PENDING,
    )
    try:
        db.add(row)
        db.commit()
        db.refresh(row)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Submission insert failed for user=%s", user_id)
        raise StoreWriteError(str(e)) from e
    cache.invalidate_prefix(submissions_cache_prefix(user_id))
    logger.info("Submission created: id=%s user=%s", row.id, user_id)
    return serialize_submission(row)


def fetch_user_submissions(db: Session, user_id: str, status: str | None = None) -> list[dict[str, Any]]:
    q = db.query(Startup).filter(Startup.user_id == user_id)
    if status:
        q = q.filter(Startup.status == status)
    return [serialize_submission(r) for r in q.order_by(Startup.created_at.desc()).all()]


def get_user_submissions(
    db: Session,
    cache: ReadThroughCache,
    user_id: str | None,
    status: str | None = None,
) -> tuple[list[dict[str, Any]], str | None]:
    """
    A user's submissions (optionally one status), cached per (user, status), plus a notice when degraded.
    A failed store read serves the stale entry if any, else an empty list.
    """
    if not user_id:
        return [], None
    if status is not None and status not in SUBMISSION_STATUSES:
        raise SubmissionValidationError({"status": f"Unknown status: {status}"})
    try:
        result = cache.lookup(submissions_cache_key(user_id, status), lambda: fetch_user_submissions(db, user_id, status))
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Submissions fetch failed for user=%s with no cached entry: %s", user_id, e)
        return [], MSG_NO_SUBMISSIONS
    return result.data, (MSG_STALE_SUBMISSIONS if result.stale else None)


def is_admin(db: Session, user_id: str | None) -> bool:
    if not user_id:
        return False
    return db.query(Admin.user_id).filter(Admin.user_id == user_id).first() is not None


def update_submission(
    db: Session,
    cache: ReadThroughCache,
    startup_id: str,
    actor_id: str | None,
    changes: dict[str, Any],
) -> dict[str, Any]:
    """Owner or admin edits of display fields. Anything outside EDITABLE_FIELDS is rejected."""
    if not actor_id:
        raise AuthRequiredError()
    row = db.query(Startup).filter(Startup.id == startup_id).first()
    if row is None:
        raise NotFoundError(f"Submission {startup_id} not found")
    if row.user_id != actor_id and not is_admin(db, actor_id):
        raise ForbiddenError("Only the owner or an admin can edit this submission")

    unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
    if unknown:
        raise SubmissionValidationError({k: "Field cannot be edited" for k in unknown})
    errors = validate_submission_fields(changes, partial=True)
    if errors:
        raise SubmissionValidationError(errors)

    for key, value in changes.items():
        setattr(row, key, value.strip() if isinstance(value, str) else value)
    try:
        db.commit()
        db.refresh(row)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Submission update failed: id=%s", startup_id)
        raise StoreWriteError(str(e)) from e
    cache.invalidate_prefix(submissions_cache_prefix(row.user_id))
    if row.status == STATUS_APPROVED:
        cache.invalidate(CACHE_KEY_APPROVED_LAUNCHES)
    return serialize_submission(row)
