"""Admin principals: may review submissions and edit any startup."""
from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from launchboard.db.base import Base


class Admin(Base):
    __tablename__ = "admins"

    user_id = Column(String(128), primary_key=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
