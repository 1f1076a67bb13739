"""Startup submissions: create (multipart with logo), list mine, edit."""
import logging
from typing import Any

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from launchboard.api.deps import get_blob_store, get_cache, require_user
from launchboard.config import settings
from launchboard.core.errors import LaunchboardError, service_error_to_http
from launchboard.db.session import get_db
from launchboard.services.cache import ReadThroughCache
from launchboard.services.storage import BlobStore
from launchboard.services.submission_service import (
    UploadedImage,
    create_submission,
    get_user_submissions,
    update_submission,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("", status_code=201)
async def post_submission(
    name: str = Form(""),
    url: str = Form(""),
    social_handle: str = Form(""),
    description: str = Form(""),
    category: str = Form(""),
    logo: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    cache: ReadThroughCache = Depends(get_cache),
    blob_store: BlobStore = Depends(get_blob_store),
    user_id: str = Depends(require_user),
) -> dict[str, Any]:
    """Submit a startup for review. Validation errors come back as 422 with per-field messages."""
    image = None
    if logo is not None:
        image = UploadedImage(filename=logo.filename or "logo", content_type=logo.content_type, data=await logo.read())
    fields = {
        "name": name,
        "url": url,
        "social_handle": social_handle,
        "description": description,
        "category": category,
    }
    try:
        return create_submission(db, blob_store, cache, user_id, fields, image, settings.max_logo_bytes)
    except LaunchboardError as e:
        raise service_error_to_http(e)


@router.get("/mine")
def list_my_submissions(
    status: str | None = Query(None),
    db: Session = Depends(get_db),
    cache: ReadThroughCache = Depends(get_cache),
    user_id: str = Depends(require_user),
) -> dict[str, Any]:
    """The caller's submissions, newest first. `notice` is set when the list is stale or unavailable."""
    try:
        submissions, notice = get_user_submissions(db, cache, user_id, status)
    except LaunchboardError as e:
        raise service_error_to_http(e)
    return {"submissions": submissions, "notice": notice}


class UpdateSubmissionBody(BaseModel):
    name: str | None = Field(None, max_length=256)
    url: str | None = Field(None, max_length=2048)
    social_handle: str | None = Field(None, max_length=256)
    description: str | None = None
    category: str | None = None


@router.patch("/{startup_id}")
def patch_submission(
    startup_id: str,
    body: UpdateSubmissionBody,
    db: Session = Depends(get_db),
    cache: ReadThroughCache = Depends(get_cache),
    user_id: str = Depends(require_user),
) -> dict[str, Any]:
    """Owner or admin edit. Only fields present in the body are changed."""
    try:
        return update_submission(db, cache, startup_id, user_id, body.model_dump(exclude_unset=True))
    except LaunchboardError as e:
        raise service_error_to_http(e)
