from launchboard.models.admin import Admin
from launchboard.models.startup import Startup
from launchboard.models.startup_upvote import StartupUpvote
from launchboard.models.user import User
from launchboard.models.username import Username

__all__ = [
    "Admin",
    "Startup",
    "StartupUpvote",
    "User",
    "Username",
]
