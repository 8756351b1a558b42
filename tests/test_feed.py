import random

from beyond_january.feed import (
    GOAL_SNIPPETS,
    MAX_AGE_SECONDS,
    FeedItem,
    format_number,
    initial_feed,
    tick_feed,
)
from beyond_january.metrics import STATUSES


class FixedRandom(random.Random):
    """Random whose random() always returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self._value = value

    def random(self) -> float:
        return self._value


def test_initial_feed(rng):
    feed = initial_feed(rng)
    assert len(feed) == 8
    assert [x.seconds_ago for x in feed] == sorted(x.seconds_ago for x in feed)
    assert {x.id for x in feed} == {f"seed-{i}" for i in range(8)}
    for x in feed:
        assert 12 <= x.seconds_ago <= 360
        assert x.status in STATUSES
        assert x.goal in GOAL_SNIPPETS


def test_initial_feed_is_repeatable_with_same_seed():
    assert initial_feed(random.Random(7)) == initial_feed(random.Random(7))


def test_tick_adds_live_item():
    items = [FeedItem("seed-0", "complete", "Journal", 10), FeedItem("seed-1", "partial", "Stretch", 998)]
    out = tick_feed(items, FixedRandom(0.1), now_ms=1700000000000)

    assert out[0].id == "live-1700000000000"
    assert out[0].seconds_ago == 1
    assert 12 <= out[1].seconds_ago <= 16
    assert out[2].seconds_ago == MAX_AGE_SECONDS
    # inputs untouched
    assert items[0].seconds_ago == 10


def test_tick_without_new_item_ages_by_two():
    items = [FeedItem("seed-0", "complete", "Journal", 10), FeedItem("seed-1", "partial", "Stretch", 998)]
    out = tick_feed(items, FixedRandom(0.9), now_ms=1)
    assert [x.seconds_ago for x in out] == [12, MAX_AGE_SECONDS]
    assert [x.id for x in out] == ["seed-0", "seed-1"]


def test_tick_keeps_at_most_max_items(rng):
    feed = initial_feed(rng, size=10)
    for i in range(20):
        feed = tick_feed(feed, FixedRandom(0.0), now_ms=i)
        assert len(feed) == 10
    assert feed[0].id == "live-19"


def test_format_number():
    assert format_number(0) == "0"
    assert format_number(999) == "999"
    assert format_number(2869) == "2,869"
    assert format_number(1234567) == "1,234,567"
