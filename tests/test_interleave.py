import pytest

from launchboard.services.launches.interleave import boosted_spacing, interleave_boosted


def _regular(n):
    return [f"r{i}" for i in range(n)]


def _boosted(n):
    return [f"b{i}" for i in range(n)]


def test_no_boosted_returns_regular_unchanged():
    regular = _regular(7)
    out = interleave_boosted(regular, [])
    assert out == regular
    assert out is not regular


def test_no_regular_returns_boosted_only():
    assert interleave_boosted([], _boosted(3)) == ["b0", "b1", "b2"]
    assert interleave_boosted([], []) == []


def test_spacing():
    assert boosted_spacing(10, 2) == 5
    assert boosted_spacing(10, 6) == 2
    assert boosted_spacing(3, 5) == 2
    assert boosted_spacing(10, 0) == 0


def test_boosted_placed_after_every_spacing_th_regular():
    out = interleave_boosted(_regular(10), _boosted(2))
    assert out == ["r0", "r1", "r2", "r3", "r4", "b0", "r5", "r6", "r7", "r8", "r9", "b1"]


def test_walk_with_minimum_spacing():
    out = interleave_boosted(_regular(6), _boosted(3))
    assert out == ["r0", "r1", "b0", "r2", "r3", "b1", "r4", "r5", "b2"]


@pytest.mark.parametrize("r", range(0, 13))
@pytest.mark.parametrize("b", range(0, 15))
def test_length_order_and_adjacency(r, b):
    regular, boosted = _regular(r), _boosted(b)
    out = interleave_boosted(regular, boosted)

    assert len(out) == r + b
    assert [x for x in out if x.startswith("r")] == regular
    assert [x for x in out if x.startswith("b")] == boosted
    if b <= r:
        for left, right in zip(out, out[1:]):
            assert not (left.startswith("b") and right.startswith("b")), out


def test_leftovers_are_spread_not_clumped():
    out = interleave_boosted(_regular(4), _boosted(3))
    assert out == ["r0", "b0", "r1", "b1", "r2", "r3", "b2"]
