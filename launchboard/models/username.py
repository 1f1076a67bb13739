"""Username claims. uid NULL = released (available to anyone)."""
from sqlalchemy import Column, String

from launchboard.db.base import Base


class Username(Base):
    __tablename__ = "usernames"

    username = Column(String(20), primary_key=True)  # lowercase
    uid = Column(String(128), nullable=True, index=True)
