"""
Activity feed for the home page.

Purely visual: no real user data is shown. Randomness comes from the
`random.Random` passed in, so a seeded generator gives a repeatable feed.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import List, Sequence

from beyond_january.metrics import STATUSES

GOAL_SNIPPETS = [
    "Drink water",
    "Run or walk",
    "Stretch",
    "Read 10 pages",
    "Practice a skill",
    "Journal",
    "Meditate",
    "Study session",
    "Cook a real meal",
    "Early bedtime",
    "Clean one thing",
    "Call family",
    "Work on my project",
    "Plan tomorrow",
    "Show up anyway",
]

MAX_AGE_SECONDS = 999


@dataclass(frozen=True)
class FeedItem:
    id: str
    status: str
    goal: str
    seconds_ago: int


def _random_item(rng: random.Random, item_id: str, seconds_ago: int) -> FeedItem:
    return FeedItem(
        id=item_id,
        status=rng.choice(STATUSES),
        goal=rng.choice(GOAL_SNIPPETS),
        seconds_ago=seconds_ago,
    )


def initial_feed(rng: random.Random, size: int = 8) -> List[FeedItem]:
    items = [_random_item(rng, f"seed-{i}", rng.randint(12, 360)) for i in range(size)]
    return sorted(items, key=lambda x: x.seconds_ago)


def tick_feed(
    items: Sequence[FeedItem],
    rng: random.Random,
    now_ms: int,
    new_item_probability: float = 0.32,
    max_items: int = 10,
) -> List[FeedItem]:
    """
    Advance the feed by one tick.

    Either a fresh item is prepended and the rest age by 2..6 seconds, or
    everything ages by 2 seconds.
    """
    if rng.random() < new_item_probability:
        fresh = _random_item(rng, f"live-{now_ms}", 1)
        aged = [
            replace(x, seconds_ago=min(x.seconds_ago + rng.randint(2, 6), MAX_AGE_SECONDS))
            for x in items
        ]
        return [fresh, *aged][:max_items]
    return [replace(x, seconds_ago=min(x.seconds_ago + 2, MAX_AGE_SECONDS)) for x in items][:max_items]


def format_number(n: int) -> str:
    return f"{n:,}"
