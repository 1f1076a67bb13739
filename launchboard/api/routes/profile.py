"""Profile: read/update the caller's profile, username availability."""
import logging
from typing import Any

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from launchboard.api.deps import get_blob_store, get_current_user_id, require_user
from launchboard.config import settings
from launchboard.core.errors import LaunchboardError, service_error_to_http
from launchboard.db.session import get_db
from launchboard.services.profile_service import check_username, get_profile, update_profile
from launchboard.services.storage import BlobStore
from launchboard.services.submission_service import UploadedImage

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("")
def read_profile(db: Session = Depends(get_db), user_id: str = Depends(require_user)) -> dict[str, Any]:
    """The caller's profile; `profile` is null until the first save."""
    try:
        return {"profile": get_profile(db, user_id)}
    except LaunchboardError as e:
        raise service_error_to_http(e)


@router.put("")
async def write_profile(
    display_name: str = Form(""),
    username: str = Form(""),
    bio: str = Form(""),
    avatar: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    user_id: str = Depends(require_user),
) -> dict[str, Any]:
    image = None
    if avatar is not None:
        image = UploadedImage(filename=avatar.filename or "avatar", content_type=avatar.content_type, data=await avatar.read())
    try:
        profile = update_profile(
            db,
            blob_store,
            user_id,
            {"display_name": display_name, "username": username, "bio": bio},
            avatar=image,
            max_avatar_bytes=settings.max_logo_bytes,
        )
    except LaunchboardError as e:
        raise service_error_to_http(e)
    return {"profile": profile}


@router.get("/username-available")
def username_available(
    username: str = Query(..., max_length=64),
    db: Session = Depends(get_db),
    user_id: str | None = Depends(get_current_user_id),
) -> dict[str, Any]:
    return check_username(db, username, user_id)
