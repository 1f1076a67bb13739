"""
Shared route dependencies: caller identity, process-wide cache and blob store.

Identity comes from the external auth provider as an opaque user id in the X-User-Id header.
Tests override these with app.dependency_overrides.
"""
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from launchboard.config import settings
from launchboard.core.errors import AuthRequiredError, ForbiddenError, service_error_to_http
from launchboard.db.session import get_db
from launchboard.services.cache import ReadThroughCache
from launchboard.services.storage import LocalBlobStore
from launchboard.services.submission_service import is_admin

_cache = ReadThroughCache(ttl_seconds=settings.cache_ttl_seconds)
_blob_store = LocalBlobStore(settings.blob_storage_dir, settings.blob_base_url)


def get_cache() -> ReadThroughCache:
    return _cache


def get_blob_store() -> LocalBlobStore:
    return _blob_store


def get_current_user_id(x_user_id: str | None = Header(None, alias="X-User-Id")) -> str | None:
    return (x_user_id or "").strip() or None


def require_user(user_id: str | None = Depends(get_current_user_id)) -> str:
    if not user_id:
        raise service_error_to_http(AuthRequiredError())
    return user_id


def require_admin(user_id: str = Depends(require_user), db: Session = Depends(get_db)) -> str:
    if not is_admin(db, user_id):
        raise service_error_to_http(ForbiddenError("Admin access required"))
    return user_id
