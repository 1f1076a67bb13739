import pytest
from sqlalchemy.exc import OperationalError

from launchboard.core.constants import STATUS_APPROVED
from launchboard.core.errors import MSG_NO_SUBMISSIONS, MSG_STALE_SUBMISSIONS, SubmissionValidationError
from launchboard.services.submission_service import (
    UploadedImage,
    logo_path,
    update_submission,
    validate_image,
    validate_submission_fields,
)

OWNER = {"X-User-Id": "owner-1"}
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

VALID_FORM = {
    "name": "Acme",
    "url": "https://acme.example.com",
    "social_handle": "@acme",
    "description": "Rockets, delivered.",
    "category": "productivity",
}


def _submit(client, form=None, logo=PNG, content_type="image/png", headers=OWNER):
    files = {"logo": ("logo.png", logo, content_type)} if logo is not None else None
    return client.post("/submissions", data=form or VALID_FORM, files=files, headers=headers)


def test_field_validation_messages():
    errors = validate_submission_fields({"name": " ", "url": "acme.com", "description": "x" * 201, "category": "toys"})
    assert set(errors) == {"name", "url", "social_handle", "description", "category"}
    assert validate_submission_fields(VALID_FORM) == {}
    assert validate_submission_fields({"description": "ok"}, partial=True) == {}


def test_image_validation():
    assert validate_image(UploadedImage("a.png", "image/png", PNG), 200 * 1024) == {}
    assert "logo" in validate_image(None, 200 * 1024)
    assert "logo" in validate_image(UploadedImage("a.png", "image/png", b"x" * (200 * 1024 + 1)), 200 * 1024)
    assert "logo" in validate_image(UploadedImage("a.pdf", "application/pdf", PNG), 200 * 1024)


def test_logo_path_is_timestamped_and_sanitized():
    assert logo_path("my logo!.png", now_ms=1700) == "startup-logos/1700_my_logo_.png"


def test_create_submission_is_pending(client, blob_store):
    r = _submit(client)
    assert r.status_code == 201
    body = r.json()
    assert body["status"] == "pending"
    assert body["user_id"] == "owner-1"
    assert body["upvotes"] == 0
    (path,) = blob_store.blobs
    assert path.startswith("startup-logos/")
    assert body["logo_url"] == f"https://blobs.test/{path}"


def test_create_requires_sign_in(client, blob_store):
    r = _submit(client, headers={})
    assert r.status_code == 401
    assert blob_store.blobs == {}


def test_invalid_submission_returns_field_errors(client, blob_store):
    r = _submit(client, form={**VALID_FORM, "url": "ftp://x", "category": ""}, logo=None)
    assert r.status_code == 422
    detail = r.json()["detail"]
    assert detail["error"] == "validation"
    assert set(detail["fields"]) == {"url", "category", "logo"}
    assert blob_store.blobs == {}


def test_oversized_logo_rejected(client):
    r = _submit(client, logo=b"x" * (200 * 1024 + 1))
    assert r.status_code == 422
    assert "logo" in r.json()["detail"]["fields"]


def test_my_submissions_cache_is_invalidated_on_create(client):
    _submit(client)
    first = client.get("/submissions/mine", headers=OWNER).json()["submissions"]
    assert len(first) == 1
    _submit(client, form={**VALID_FORM, "name": "Second"})
    mine = client.get("/submissions/mine", headers=OWNER).json()["submissions"]
    assert sorted(s["name"] for s in mine) == ["Acme", "Second"]
    pending = client.get("/submissions/mine", params={"status": "pending"}, headers=OWNER).json()
    assert len(pending["submissions"]) == 2
    approved = client.get("/submissions/mine", params={"status": "approved"}, headers=OWNER).json()
    assert approved["submissions"] == []


def test_unknown_status_filter_is_422(client):
    r = client.get("/submissions/mine", params={"status": "archived"}, headers=OWNER)
    assert r.status_code == 422


def test_owner_can_edit_other_user_cannot(client):
    startup_id = _submit(client).json()["id"]
    r = client.patch(f"/submissions/{startup_id}", json={"description": "New pitch"}, headers=OWNER)
    assert r.status_code == 200
    assert r.json()["description"] == "New pitch"

    r = client.patch(f"/submissions/{startup_id}", json={"name": "Hijacked"}, headers={"X-User-Id": "mallory"})
    assert r.status_code == 403


def test_admin_can_edit_any_submission(client, admin):
    startup_id = _submit(client).json()["id"]
    r = client.patch(f"/submissions/{startup_id}", json={"category": "design"}, headers={"X-User-Id": admin})
    assert r.status_code == 200
    assert r.json()["category"] == "design"


def test_edit_validates_changed_fields(client):
    startup_id = _submit(client).json()["id"]
    r = client.patch(f"/submissions/{startup_id}", json={"url": "nope"}, headers=OWNER)
    assert r.status_code == 422
    assert set(r.json()["detail"]["fields"]) == {"url"}


def test_upvote_fields_are_not_editable(db, cache, make_startup):
    row = make_startup()
    with pytest.raises(SubmissionValidationError) as exc:
        update_submission(db, cache, row.id, "owner-1", {"upvotes": 99})
    assert "upvotes" in exc.value.errors


def test_editing_approved_listing_refreshes_feed(client, make_startup):
    row = make_startup(status=STATUS_APPROVED)
    client.get("/launches/feed")
    client.patch(f"/submissions/{row.id}", json={"name": "Renamed"}, headers=OWNER)
    names = [i["name"] for i in client.get("/launches/feed").json()["items"]]
    assert names == ["Renamed"]


def _store_down(*args, **kwargs):
    raise OperationalError("SELECT startups", {}, Exception("connection refused"))


def test_my_submissions_read_failure_returns_empty_with_notice(client, monkeypatch):
    monkeypatch.setattr("launchboard.services.submission_service.fetch_user_submissions", _store_down)
    r = client.get("/submissions/mine", headers=OWNER)
    assert r.status_code == 200
    assert r.json() == {"submissions": [], "notice": MSG_NO_SUBMISSIONS}


def test_my_submissions_serves_stale_list_when_refresh_fails(client, clock, monkeypatch):
    _submit(client)
    fresh = client.get("/submissions/mine", headers=OWNER).json()
    assert fresh["notice"] is None
    assert len(fresh["submissions"]) == 1

    monkeypatch.setattr("launchboard.services.submission_service.fetch_user_submissions", _store_down)
    clock.advance(301)
    stale = client.get("/submissions/mine", headers=OWNER).json()
    assert stale["submissions"] == fresh["submissions"]
    assert stale["notice"] == MSG_STALE_SUBMISSIONS
