#!/usr/bin/env python3
"""Print the launch feed as a client would scroll it: premium, then each batch with boosted interleaved.
Run from the project root: python scripts/preview_feed.py [--pages N]
"""
import argparse
import sys
import time
from datetime import datetime, timezone
from pathlib import Path

project_dir = Path(__file__).resolve().parent.parent
if str(project_dir) not in sys.path:
    sys.path.insert(0, str(project_dir))

from launchboard.config import settings
from launchboard.db.session import SessionLocal
from launchboard.services.launches.feed import eligible_listings, partition_tiers, render_batch
from launchboard.services.launches.pagination import FeedPaginator
from launchboard.services.launches.rotation import rotate, rotation_index, seconds_until_next_window
from launchboard.services.launches.store import fetch_approved_listings


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--pages", type=int, default=0, help="Stop after N pages (0 = all)")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        listings = fetch_approved_listings(db)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()

    now = datetime.now(timezone.utc)
    tiers = partition_tiers(eligible_listings(listings, now))
    index = rotation_index(now.timestamp(), settings.rotation_window_seconds, len(tiers.regular))
    wait = seconds_until_next_window(time.time(), settings.rotation_window_seconds)
    print(f"Rotation index {index} of {len(tiers.regular)} regular; next rotation in {wait:.0f}s")

    print("\n== Premium ==")
    for l in tiers.premium:
        print(f"  * {l.name}  ({l.upvotes} upvotes)")

    paginator = FeedPaginator(rotate(tiers.regular, index), batch_size=settings.feed_batch_size)
    batch = paginator.batches[0] if paginator.batches else []
    while batch:
        print(f"\n== Page {paginator.page} ==")
        for item in render_batch(batch, tiers.boosted, index):
            l = item["listing"]
            print(f"  {item['key']:<48} {l.badge:<12} {l.name}")
        if args.pages and paginator.page >= args.pages:
            break
        batch = paginator.load_more()
    if not paginator.batches and tiers.boosted:
        print("\n== Boosted ==")
        for item in render_batch([], tiers.boosted, index):
            print(f"  {item['key']:<48} {item['listing'].name}")


if __name__ == "__main__":
    main()
