#!/usr/bin/env python3
"""
Quick checks so the API can start. Run from the project root:
  python scripts/check_backend.py
"""
import os
import sys
from pathlib import Path

project_dir = Path(__file__).resolve().parent.parent
os.chdir(project_dir)
if str(project_dir) not in sys.path:
    sys.path.insert(0, str(project_dir))


def main():
    errors = []

    # 1) .env
    env_file = project_dir / ".env"
    if not env_file.exists():
        errors.append(".env missing. Copy from .env.example and set DATABASE_URL, etc.")
    else:
        print("OK  .env exists")

    # 2) DB connection and schema
    try:
        from sqlalchemy import inspect, text

        from launchboard.db.session import engine
        from launchboard.db.tables import ALL_TABLE_NAMES

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("OK  Database connection (DATABASE_URL)")
        missing = sorted(set(ALL_TABLE_NAMES) - set(inspect(engine).get_table_names()))
        if missing:
            errors.append(f"Missing tables {missing}. Run: alembic upgrade head")
            print("FAIL Missing tables:", ", ".join(missing))
        else:
            print("OK  All tables present")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    # 3) App import (catches missing deps, bad imports)
    try:
        from launchboard.main import app  # noqa: F401
        print("OK  App import (launchboard.main)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)

    # 4) Upload directory
    try:
        from launchboard.config import settings

        Path(settings.blob_storage_dir).mkdir(parents=True, exist_ok=True)
        print("OK  Blob storage dir", settings.blob_storage_dir)
    except OSError as e:
        errors.append(f"Blob storage dir: {e}")
        print("FAIL Blob storage dir:", e)

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        return 1

    print("\nAll checks passed. Start with: uvicorn launchboard.main:app --reload")
    return 0


if __name__ == "__main__":
    sys.exit(main())
