"""
User profiles and username claims.

usernames: one row per lowercase username; uid NULL means released. A username is available when it has
no row, a released row, or a row owned by the asking user.
"""
from __future__ import annotations

import logging
import re
import time
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from launchboard.core.constants import AVATAR_PREFIX, USERNAME_PATTERN
from launchboard.core.errors import AuthRequiredError, StoreWriteError, SubmissionValidationError, UsernameTakenError
from launchboard.models.user import User
from launchboard.models.username import Username
from launchboard.services.storage import BlobStore
from launchboard.services.submission_service import UploadedImage, validate_image

logger = logging.getLogger(__name__)

MSG_USERNAME_FORMAT = "Username must be 3-20 characters and can only contain letters, numbers, and underscores"


def serialize_profile(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "display_name": user.display_name,
        "username": user.username,
        "email": user.email,
        "bio": user.bio,
        "avatar_url": user.avatar_url,
        "updated_at": user.updated_at.isoformat() if user.updated_at else None,
    }


def get_profile(db: Session, user_id: str | None) -> dict[str, Any] | None:
    if not user_id:
        raise AuthRequiredError()
    user = db.query(User).filter(User.id == user_id).first()
    return serialize_profile(user) if user else None


def check_username(db: Session, username: str, user_id: str | None = None) -> dict[str, Any]:
    """{available, message}. Format errors are reported as unavailable, not raised."""
    if not re.match(USERNAME_PATTERN, username or ""):
        return {"available": False, "message": MSG_USERNAME_FORMAT}
    row = db.query(Username).filter(Username.username == username.lower()).first()
    available = row is None or not row.uid or row.uid == user_id
    return {"available": available, "message": "Username is available" if available else "Username is already taken"}


def avatar_path(user_id: str, filename: str, now_ms: int | None = None) -> str:
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    ext = filename.rsplit(".", 1)[-1].lower() if "." in (filename or "") else "img"
    return f"{AVATAR_PREFIX}/{user_id}/{now_ms}.{re.sub(r'[^a-z0-9]', '', ext) or 'img'}"


def update_profile(
    db: Session,
    blob_store: BlobStore,
    user_id: str | None,
    changes: dict[str, Any],
    avatar: UploadedImage | None = None,
    max_avatar_bytes: int = 200 * 1024,
) -> dict[str, Any]:
    """
    Upsert the profile. A changed username releases the old claim and takes the new one in the same commit.
    Empty display name/username keep the current values.
    """
    if not user_id:
        raise AuthRequiredError()
    user = db.query(User).filter(User.id == user_id).first()
    current_username = user.username if user is not None else None

    new_username = (changes.get("username") or "").strip().lower()
    rename = bool(new_username) and new_username != (current_username or "")
    if rename:
        if not re.match(USERNAME_PATTERN, new_username):
            raise SubmissionValidationError({"username": MSG_USERNAME_FORMAT})
        status = check_username(db, new_username, user_id)
        if not status["available"]:
            raise UsernameTakenError(status["message"])

    avatar_url = None
    if avatar is not None:
        errors = validate_image(avatar, max_avatar_bytes, field="avatar")
        if errors:
            raise SubmissionValidationError(errors)
        path = avatar_path(user_id, avatar.filename)
        blob_store.upload(path, avatar.data, avatar.content_type)
        avatar_url = blob_store.download_url(path)

    if user is None:
        user = User(id=user_id)
        db.add(user)
    if avatar_url:
        user.avatar_url = avatar_url

    try:
        if rename:
            if user.username:
                old = db.query(Username).filter(Username.username == user.username).first()
                if old is not None:
                    old.uid = None
            claim = db.query(Username).filter(Username.username == new_username).first()
            if claim is None:
                db.add(Username(username=new_username, uid=user_id))
            else:
                claim.uid = user_id
            user.username = new_username
        user.display_name = (changes.get("display_name") or "").strip() or user.display_name
        user.bio = (changes.get("bio") or "").strip()
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Profile update failed for user=%s", user_id)
        raise StoreWriteError(str(e)) from e
    logger.info("Profile updated: user=%s username=%s", user_id, user.username)
    return serialize_profile(user)
