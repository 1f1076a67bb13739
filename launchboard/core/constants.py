"""
Centralized constants for listings, submissions and the scheduler.

Change job IDs, tiers or validation limits here instead of scattering literals across services and routes.
Tunable values (window width, batch size, TTL) live in config.Settings.
"""
# Scheduler job IDs (must match ids used in scheduler/rotation_job.py)
ROTATION_JOB_ID = "launch_rotation"

# Listing tiers. Absent listing_type means regular.
LISTING_REGULAR = "regular"
LISTING_BOOSTED = "boosted"
LISTING_PREMIUM = "premium"
LISTING_TYPES = (LISTING_REGULAR, LISTING_BOOSTED, LISTING_PREMIUM)
# Tiers shown regardless of launch date
ALWAYS_VISIBLE_TYPES = frozenset([LISTING_BOOSTED, LISTING_PREMIUM])

# Submission lifecycle
STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
SUBMISSION_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)

DEFAULT_CATEGORY = "New Launch"
CATEGORIES = {
    "business": "Business",
    "marketing": "Marketing",
    "design": "Design",
    "lifestyle": "Lifestyle",
    "productivity": "Productivity",
    "for-sale": "For Sale",
}

# Form validation
DESCRIPTION_MAX_LENGTH = 200
URL_PATTERN = r"^https?://.+"
USERNAME_PATTERN = r"^[a-zA-Z0-9_]{3,20}$"

# Blob storage prefixes
LOGO_PREFIX = "startup-logos"
AVATAR_PREFIX = "avatars"

# Cache keys (one entry per query shape)
CACHE_KEY_APPROVED_LAUNCHES = "launches:approved"


def submissions_cache_key(user_id: str, status: str | None = None) -> str:
    return f"submissions:{user_id}:{status or 'all'}"


def submissions_cache_prefix(user_id: str) -> str:
    return f"submissions:{user_id}:"
