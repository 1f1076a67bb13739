"""One row per (startup, user) upvote. The set of user_ids is the listing's upvoted_by."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from launchboard.db.base import Base


class StartupUpvote(Base):
    __tablename__ = "startup_upvotes"
    __table_args__ = (
        UniqueConstraint("startup_id", "user_id", name="uq_startup_upvotes_startup_user"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    startup_id = Column(String(32), ForeignKey("startups.id"), nullable=False, index=True)
    user_id = Column(String(128), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
