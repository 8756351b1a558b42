"""
Deterministic daily check-in counter.

The home page shows a "check-ins today" number that is the same for every
viewer at the same wall-clock moment and resets at local midnight. It is not
backed by real data: the day's date is hashed into a seed, the seed drives a
small PRNG, and the PRNG draws the gaps between synthetic events.

The hash (FNV-1a, 32 bit) and the PRNG (Mulberry32) are a fixed protocol.
Changing either changes every displayed value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Iterator, Optional

from beyond_january.errors import ConfigurationError

NAMESPACE = "beyond-january-daily-counter-"

MIN_GAP_SECONDS = 1
MAX_GAP_SECONDS = 60

_MASK32 = 0xFFFFFFFF
_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619
_MULBERRY_STEP = 0x6D2B79F5


# --- Date keys ----------------------------------------------------------------

def _local(now: datetime) -> datetime:
    # Naive datetimes are already local wall clock.
    if now.tzinfo is None:
        return now
    return now.astimezone()


def local_date_key(now: datetime) -> str:
    """
    'YYYY-MM-DD' for the local calendar day of `now`.
    """
    d = _local(now)
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def seconds_since_midnight(now: datetime) -> int:
    """
    Real seconds elapsed since local midnight of `now`'s date.

    Measured between instants, not read off the clock face, so the value
    keeps rising through a daylight saving change.
    """
    local = now.astimezone()
    midnight = datetime.combine(local.date(), time()).astimezone()
    return (local - midnight) // timedelta(seconds=1)


# --- Hash + PRNG --------------------------------------------------------------

def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def fnv1a_32(text: str) -> int:
    """
    FNV-1a over the UTF-16 code units of `text`.

    Code units rather than bytes so a browser computing the same key gets
    the same seed, including for characters outside the BMP.
    """
    data = text.encode("utf-16-le")
    h = _FNV_OFFSET
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = _imul(h, _FNV_PRIME)
    return h


def seed_for_date(date_key: str, namespace: str = NAMESPACE) -> int:
    return fnv1a_32(namespace + date_key)


def mulberry32(seed: int) -> Iterator[float]:
    """
    Endless stream of floats in [0, 1) from a 32-bit seed.
    """
    state = seed & _MASK32
    while True:
        state = (state + _MULBERRY_STEP) & _MASK32
        t = state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        yield (t ^ (t >> 14)) / 4294967296


# --- Simulation ---------------------------------------------------------------

def validate_gap_bounds(min_gap: int, max_gap: int) -> None:
    for name, value in (("min_gap", min_gap), ("max_gap", max_gap)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise ConfigurationError(f"{name} must be positive, got {value}")
    if min_gap > max_gap:
        raise ConfigurationError(f"min_gap ({min_gap}) is larger than max_gap ({max_gap})")


def count_events_by(seed: int, elapsed_seconds: int, min_gap: int, max_gap: int) -> int:
    """
    Count synthetic events that happened by `elapsed_seconds`.

    Gaps between events are drawn uniformly from [min_gap, max_gap]. The
    first event lands after the first gap, so T = 0 always gives 0.
    """
    if elapsed_seconds < 0:
        raise ValueError(f"elapsed_seconds must be >= 0, got {elapsed_seconds}")
    span = max_gap - min_gap + 1
    rng = mulberry32(seed)
    t = 0
    count = 0
    while True:
        t += min_gap + math.floor(next(rng) * span)
        if t > elapsed_seconds:
            break
        count += 1
    return count


def compute_event_count(date_key: str, elapsed_seconds: int, min_gap: int, max_gap: int) -> int:
    validate_gap_bounds(min_gap, max_gap)
    return count_events_by(seed_for_date(date_key), elapsed_seconds, min_gap, max_gap)


@dataclass(frozen=True)
class GapBounds:
    min_gap: int = MIN_GAP_SECONDS
    max_gap: int = MAX_GAP_SECONDS

    def __post_init__(self) -> None:
        validate_gap_bounds(self.min_gap, self.max_gap)


class DeterministicCounter:
    """
    Validated counter configuration.

    Holds no state between calls; re-evaluating on a timer is up to the caller.
    """

    def __init__(self, bounds: Optional[GapBounds] = None, namespace: str = NAMESPACE):
        self.bounds = bounds or GapBounds()
        self.namespace = namespace

    def count(self, date_key: str, elapsed_seconds: int) -> int:
        return count_events_by(
            seed_for_date(date_key, self.namespace),
            elapsed_seconds,
            self.bounds.min_gap,
            self.bounds.max_gap,
        )

    def count_at(self, now: datetime) -> int:
        return self.count(local_date_key(now), seconds_since_midnight(now))

    def __repr__(self) -> str:
        return (
            f"DeterministicCounter(min_gap={self.bounds.min_gap}, "
            f"max_gap={self.bounds.max_gap}, namespace={self.namespace!r})"
        )


def event_count_at(
    now: datetime,
    bounds: Optional[GapBounds] = None,
    namespace: str = NAMESPACE,
) -> int:
    return DeterministicCounter(bounds, namespace).count_at(now)
