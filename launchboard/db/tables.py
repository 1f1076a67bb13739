"""
Single source of truth for database tables that exist after migrations.

Use these names when writing raw SQL. alembic/env.py asserts the models match this list.
"""
ALL_TABLE_NAMES = (
    "users",
    "usernames",
    "admins",
    "startups",
    "startup_upvotes",
)
