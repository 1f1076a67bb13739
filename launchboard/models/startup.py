"""Startup submission. Once approved with a scheduled launch date it is a public listing.

status: pending -> approved | rejected; rejected may be re-approved, approved may be re-rejected.
listing_type: regular | boosted | premium (NULL = regular). Set on approval.
upvotes: counter kept equal to the number of startup_upvotes rows by the toggle.
"""
import uuid

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from launchboard.db.base import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class Startup(Base):
    __tablename__ = "startups"

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(String(128), nullable=False, index=True)  # submitter; immutable
    name = Column(String(256), nullable=False)
    url = Column(String(2048), nullable=False)
    social_handle = Column(String(256), nullable=True)
    description = Column(String(256), nullable=True)
    category = Column(String(64), nullable=True)
    logo_url = Column(String(2048), nullable=True)
    status = Column(String(16), nullable=False, default="pending", index=True)
    listing_type = Column(String(16), nullable=True)
    do_follow_backlink = Column(Boolean, nullable=False, default=False)
    scheduled_launch_date = Column(DateTime(timezone=True), nullable=True, index=True)
    upvotes = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
