"""
FastAPI app entrypoint.

Public launch feed, submissions, admin review, profiles. Auth is external: callers send X-User-Id.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# Load .env from the project root before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from launchboard.api.routes import admin, launches, pricing, profile, submissions
from launchboard.config import settings
from launchboard.scheduler.rotation_job import start_rotation_ticker

logger = logging.getLogger(__name__)

# Scheduler: rotation ticker fires on every window boundary
_scheduler = BackgroundScheduler()


@asynccontextmanager
async def lifespan(app: FastAPI):
    _scheduler.start()
    app.state.scheduler = _scheduler
    ticker = start_rotation_ticker(_scheduler)
    app.state.rotation_ticker = ticker
    logger.info(
        "Launchboard ready; rotation window %ss, next tick at %s",
        settings.rotation_window_seconds,
        ticker.next_tick_at.isoformat() if ticker.next_tick_at else None,
    )
    yield
    ticker.cancel()
    _scheduler.shutdown(wait=False)


app = FastAPI(title="Launchboard", version="0.1.0", lifespan=lifespan)

# CORS: dev origins + optional CORS_ORIGINS (comma-separated) for the production frontend
_cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.cors_origins:
    _cors_origins.extend(o.strip() for o in settings.cors_origins.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(launches.router, prefix="/launches", tags=["launches"])
app.include_router(submissions.router, prefix="/submissions", tags=["submissions"])
app.include_router(admin.router, prefix="/admin", tags=["admin"])
app.include_router(profile.router, prefix="/profile", tags=["profile"])
app.include_router(pricing.router, prefix="/pricing", tags=["pricing"])

# Local blob store: uploaded logos/avatars served from blob_base_url
Path(settings.blob_storage_dir).mkdir(parents=True, exist_ok=True)
if settings.blob_base_url.startswith("/"):
    app.mount(settings.blob_base_url, StaticFiles(directory=settings.blob_storage_dir), name="uploads")


@app.get("/", include_in_schema=False)
def root():
    """Root: point to API docs and health."""
    return {"message": "Launchboard API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
