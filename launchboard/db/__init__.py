from launchboard.db.base import Base
from launchboard.db.session import get_db, engine, SessionLocal
from launchboard.db.tables import ALL_TABLE_NAMES

__all__ = ["get_db", "engine", "SessionLocal", "Base", "ALL_TABLE_NAMES"]
