#!/usr/bin/env python3
"""Make a user an admin (may review submissions and edit any startup).
Run from the project root: python scripts/grant_admin.py <user_id>
"""
import sys
from pathlib import Path

project_dir = Path(__file__).resolve().parent.parent
if str(project_dir) not in sys.path:
    sys.path.insert(0, str(project_dir))

from launchboard.db.session import SessionLocal
from launchboard.services.admin_service import grant_admin


def main():
    if len(sys.argv) != 2 or not sys.argv[1].strip():
        print("Usage: grant_admin.py <user_id>", file=sys.stderr)
        sys.exit(2)
    user_id = sys.argv[1].strip()
    db = SessionLocal()
    try:
        if grant_admin(db, user_id):
            print(f"{user_id} is now an admin.")
        else:
            print(f"{user_id} was already an admin.")
    except Exception as e:
        db.rollback()
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
