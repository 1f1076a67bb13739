"""User profile keyed by the auth provider's opaque user id."""
from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from launchboard.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(128), primary_key=True)
    display_name = Column(String(256), nullable=True)
    username = Column(String(20), nullable=True)  # lowercase; claimed through usernames
    email = Column(String(320), nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(2048), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
