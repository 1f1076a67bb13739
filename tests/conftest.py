"""
Shared fixtures: in-memory SQLite session, fake clock, fake blob store, TestClient wired through
dependency_overrides.
"""
import os
import tempfile
import time
from datetime import datetime, timedelta, timezone

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BLOB_STORAGE_DIR", tempfile.mkdtemp(prefix="launchboard-blobs-"))
# Week bounds follow the process local zone; tests run in UTC unless they switch it.
os.environ["TZ"] = "UTC"
time.tzset()

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import launchboard.models  # noqa: F401
from launchboard.api.deps import get_blob_store, get_cache
from launchboard.core.constants import LISTING_REGULAR, STATUS_APPROVED
from launchboard.db.base import Base
from launchboard.db.session import get_db
from launchboard.models.admin import Admin
from launchboard.models.startup import Startup
from launchboard.services.cache import ReadThroughCache

ADMIN_ID = "admin-1"


class FakeClock:
    """Callable clock in epoch seconds; advance() moves it forward."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeBlobStore:
    def __init__(self):
        self.blobs: dict[str, tuple[bytes, str | None]] = {}

    def upload(self, path: str, data: bytes, content_type: str | None = None) -> None:
        self.blobs[path] = (data, content_type)

    def download_url(self, path: str) -> str:
        return f"https://blobs.test/{path}"


class FakeScheduler:
    """Records add_job/remove_job like APScheduler's BackgroundScheduler."""

    def __init__(self):
        self.jobs: dict[str, dict] = {}
        self.added: list[dict] = []

    def get_job(self, job_id):
        return self.jobs.get(job_id)

    def remove_job(self, job_id):
        del self.jobs[job_id]

    def add_job(self, func, trigger, **kwargs):
        job = {"func": func, "trigger": trigger, **kwargs}
        self.jobs[kwargs["id"]] = job
        self.added.append(job)
        return job


@pytest.fixture
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ReadThroughCache(ttl_seconds=300, clock=clock)


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def local_tz(monkeypatch):
    """Switch the process local zone (POSIX TZ string). Back to UTC afterwards."""

    def _set(tz: str) -> None:
        monkeypatch.setenv("TZ", tz)
        time.tzset()

    yield _set
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def client(db, cache, blob_store):
    from launchboard.main import app

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin(db):
    db.add(Admin(user_id=ADMIN_ID))
    db.commit()
    return ADMIN_ID


@pytest.fixture
def make_startup(db):
    """Insert a startup row. Rows get increasing created_at so store order is insertion order."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(**kwargs) -> Startup:
        counter["n"] += 1
        fields = dict(
            user_id="owner-1",
            name=f"Startup {counter['n']}",
            url=f"https://startup{counter['n']}.example.com",
            social_handle="@startup",
            description="Does things",
            category="productivity",
            logo_url="https://blobs.test/startup-logos/logo.png",
            status=STATUS_APPROVED,
            listing_type=LISTING_REGULAR,
            scheduled_launch_date=base,
            created_at=base + timedelta(seconds=counter["n"]),
        )
        fields.update(kwargs)
        row = Startup(**fields)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    return _make

