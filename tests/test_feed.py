from datetime import datetime, timedelta, timezone

from launchboard.core.constants import LISTING_BOOSTED, LISTING_PREMIUM, LISTING_REGULAR
from launchboard.services.launches.feed import build_launch_feed, build_weekly_launches, partition_tiers
from launchboard.services.launches.rotation import rotation_index
from launchboard.services.launches.types import Listing

UTC = timezone.utc
W = 600
# Window k = 2_857_000 is divisible by 4, 20 and 25: index 0 for those pool sizes
NOW = datetime.fromtimestamp(2_857_000 * W, tz=UTC)
PAST = NOW - timedelta(days=30)
FUTURE = NOW + timedelta(days=3)


def _l(id, listing_type=LISTING_REGULAR, launch_date=PAST, **kwargs):
    return Listing(id=id, name=id, launch_date=launch_date, listing_type=listing_type, **kwargs)


def _ids(items):
    return [i["id"] for i in items]


def test_partition_preserves_fetch_order():
    listings = [_l("r1"), _l("p1", LISTING_PREMIUM), _l("b1", LISTING_BOOSTED), _l("r2"), _l("p2", LISTING_PREMIUM)]
    tiers = partition_tiers(listings)
    assert [l.id for l in tiers.premium] == ["p1", "p2"]
    assert [l.id for l in tiers.boosted] == ["b1"]
    assert [l.id for l in tiers.regular] == ["r1", "r2"]


def test_future_regular_hidden_paid_tiers_always_visible():
    listings = [
        _l("r-past"),
        _l("r-future", launch_date=FUTURE),
        _l("b-future", LISTING_BOOSTED, launch_date=FUTURE),
        _l("p-future", LISTING_PREMIUM, launch_date=FUTURE),
    ]
    feed = build_launch_feed(listings, now=NOW)
    assert _ids(feed["premium"]) == ["p-future"]
    assert set(_ids(feed["items"])) == {"r-past", "b-future"}
    assert feed["regular_total"] == 1


def test_premium_first_page_only_and_unrotated():
    listings = [_l(f"p{i}", LISTING_PREMIUM) for i in range(3)] + [_l(f"r{i}") for i in range(15)]
    later = NOW + timedelta(seconds=W * 7)
    page1 = build_launch_feed(listings, now=later, page=1)
    page2 = build_launch_feed(listings, now=later, page=2)
    assert _ids(page1["premium"]) == ["p0", "p1", "p2"]
    assert page2["premium"] == []


def test_pages_cover_rotated_regular_pool_once():
    regular = [_l(f"r{i}") for i in range(25)]
    now = NOW + timedelta(seconds=W * 3)
    index = rotation_index(now.timestamp(), W, 25)
    expected = [l.id for l in regular[index:] + regular[:index]]

    seen = []
    page = 1
    while True:
        feed = build_launch_feed(regular, now=now, page=page)
        seen.extend(_ids(feed["items"]))
        if not feed["has_more"]:
            break
        page += 1
    assert page == 3
    assert seen == expected
    assert build_launch_feed(regular, now=now, page=4)["items"] == []


def test_each_batch_interleaved_with_boosted():
    listings = [_l(f"r{i}") for i in range(20)] + [_l("b0", LISTING_BOOSTED), _l("b1", LISTING_BOOSTED)]
    page1 = build_launch_feed(listings, now=NOW, page=1)
    page2 = build_launch_feed(listings, now=NOW, page=2)
    assert page1["rotation_index"] == 0
    expected = ["r0", "r1", "r2", "r3", "r4", "b0", "r5", "r6", "r7", "r8", "r9", "b1"]
    assert _ids(page1["items"]) == expected
    assert _ids(page2["items"]) == [x.replace("r", "r1", 1) if x.startswith("r") else x for x in expected]


def test_render_keys_change_between_windows():
    listings = [_l(f"r{i}") for i in range(4)]
    now_keys = {i["key"] for i in build_launch_feed(listings, now=NOW)["items"]}
    later_feed = build_launch_feed(listings, now=NOW + timedelta(seconds=W))
    assert now_keys.isdisjoint({i["key"] for i in later_feed["items"]})


def test_rotation_advances_one_per_window():
    listings = [_l(f"r{i}") for i in range(4)]
    first = _ids(build_launch_feed(listings, now=NOW)["items"])
    second = _ids(build_launch_feed(listings, now=NOW + timedelta(seconds=W))["items"])
    assert first == ["r0", "r1", "r2", "r3"]
    assert second == ["r1", "r2", "r3", "r0"]


def test_pinned_window_survives_boundary_between_pages():
    regular = [_l(f"r{i}") for i in range(20)]
    last_second = NOW + timedelta(seconds=W - 1)
    page1 = build_launch_feed(regular, now=last_second, page=1)
    assert page1["rotation_index"] == 0

    after_boundary = last_second + timedelta(seconds=2)
    unpinned = build_launch_feed(regular, now=after_boundary, page=2)
    assert _ids(unpinned["items"])[-1] == "r0"

    page2 = build_launch_feed(regular, now=after_boundary, page=2, pinned_index=page1["rotation_index"])
    seen = _ids(page1["items"]) + _ids(page2["items"])
    assert seen == [f"r{i}" for i in range(20)]
    assert page2["rotation_index"] == 0
    assert page2["has_more"] is False


def test_pinned_index_wraps_to_pool_size():
    regular = [_l(f"r{i}") for i in range(4)]
    feed = build_launch_feed(regular, now=NOW, pinned_index=6)
    assert feed["rotation_index"] == 2
    assert _ids(feed["items"]) == ["r2", "r3", "r0", "r1"]


def test_has_upvoted_and_link_rel():
    listings = [
        _l("r0", upvotes=1, upvoted_by=frozenset({"alice"})),
        _l("r1", do_follow_backlink=True),
        _l("b0", LISTING_BOOSTED),
    ]
    items = {i["id"]: i for i in build_launch_feed(listings, now=NOW, user_id="alice")["items"]}
    assert items["r0"]["has_upvoted"] is True
    assert items["r1"]["has_upvoted"] is False
    assert items["r0"]["rel"] == "nofollow"
    assert items["r1"]["rel"] is None
    assert items["b0"]["rel"] is None
    assert items["b0"]["badge"] == "Boosted"


def test_weekly_launches_current_week_only():
    listings = [_l("this-week", launch_date=NOW - timedelta(minutes=1)), _l("old")]
    out = build_weekly_launches(listings, now=NOW)
    assert [l["id"] for l in out["launches"]] == ["this-week"]


def test_feed_endpoint(client, make_startup):
    make_startup(name="Premium", listing_type=LISTING_PREMIUM, scheduled_launch_date=datetime.now(UTC) + timedelta(days=2))
    for _ in range(12):
        make_startup()
    make_startup(listing_type=LISTING_BOOSTED)

    r = client.get("/launches/feed")
    assert r.status_code == 200
    body = r.json()
    assert [p["name"] for p in body["premium"]] == ["Premium"]
    assert len(body["items"]) == 11
    assert body["has_more"] is True
    assert body["notice"] is None
    assert all(i["key"].startswith(f"{i['id']}-{body['rotation_index']}-") for i in body["items"])

    body2 = client.get("/launches/feed", params={"page": 2}).json()
    assert body2["premium"] == []
    assert len(body2["items"]) == 3
    assert body2["has_more"] is False


def test_leaderboard_and_rotation_endpoints(client, make_startup):
    start = datetime.now(UTC) - timedelta(days=7)
    make_startup(scheduled_launch_date=start, upvotes=3)
    r = client.get("/launches/leaderboard")
    assert r.status_code == 200
    leaders = r.json()["leaderboard"]
    assert [(l["rank"], l["upvotes"]) for l in leaders] == [(1, 3)]

    state = client.get("/launches/rotation").json()
    assert state["window_seconds"] == 600
    assert "computed_index" in state


def test_feed_endpoint_keeps_requested_rotation_index(client, make_startup):
    for _ in range(12):
        make_startup()
    body = client.get("/launches/feed", params={"page": 2, "rotation_index": 5}).json()
    assert body["rotation_index"] == 5
    assert [i["name"] for i in body["items"]] == ["Startup 4", "Startup 5"]
    assert all(i["key"].startswith(f"{i['id']}-5-") for i in body["items"])

    assert client.get("/launches/feed", params={"rotation_index": -1}).status_code == 422
