"""
Date logic and month aggregation: calendar months, per-day status counts,
optimistic status updates, consistency summaries.
"""

from __future__ import annotations

import calendar
import math
import re
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

STATUSES = ("complete", "partial", "checked_in")

STATUS_LABELS = {
    "complete": "✅ Complete",
    "partial": "🟨 Partial",
    "checked_in": "🤝 Checked in",
}

WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]  # grid columns

_MONTH_PARAM = re.compile(r"^(\d{4})-(\d{2})$")
_DAY_PARAM = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_valid_status(status: Optional[str]) -> bool:
    return status in STATUSES


def status_label(status: Optional[str]) -> str:
    if not status:
        return "—"
    return STATUS_LABELS.get(status, status)


# --- Days ---------------------------------------------------------------------

def daterange(start: date, end: date) -> List[date]:
    """
    Inclusive date range.
    """
    days = []
    cur = start
    while cur <= end:
        days.append(cur)
        cur += timedelta(days=1)
    return days


def add_days(day_iso: str, delta: int) -> str:
    return (date.fromisoformat(day_iso) + timedelta(days=delta)).isoformat()


def last_n_days(today: date, n: int = 7) -> List[str]:
    """
    The n days ending at today, oldest first.
    """
    return [(today - timedelta(days=n - 1 - i)).isoformat() for i in range(n)]


def parse_day_param(value: Optional[str]) -> Optional[str]:
    if not value or not _DAY_PARAM.match(value):
        return None
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError:
        return None


# --- Months -------------------------------------------------------------------

@dataclass(frozen=True)
class MonthInfo:
    year: int
    month: int
    start: date
    end: date
    days_in_month: int
    first_weekday: int  # 0 = Sunday

    @property
    def start_iso(self) -> str:
        return self.start.isoformat()

    @property
    def end_iso(self) -> str:
        return self.end.isoformat()

    @property
    def label(self) -> str:
        return self.start.strftime("%B %Y")


def month_info(year: int, month: int) -> MonthInfo:
    days = calendar.monthrange(year, month)[1]
    start = date(year, month, 1)
    return MonthInfo(
        year=year,
        month=month,
        start=start,
        end=date(year, month, days),
        days_in_month=days,
        first_weekday=(start.weekday() + 1) % 7,
    )


def parse_month_param(value: Optional[str]) -> Optional[Tuple[int, int]]:
    """
    'YYYY-MM' -> (year, month). Anything else -> None.
    """
    if not value:
        return None
    match = _MONTH_PARAM.match(value)
    if not match:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if not year or month < 1 or month > 12:
        return None
    return year, month


def month_to_param(year: int, month: int) -> str:
    return f"{year}-{month:02d}"


def add_months(year: int, month: int, delta: int) -> Tuple[int, int]:
    idx = year * 12 + (month - 1) + delta
    return idx // 12, idx % 12 + 1


def days_elapsed(info: MonthInfo, today: date) -> int:
    """
    Days so far when looking at the current month, the whole month otherwise.
    """
    if (info.year, info.month) == (today.year, today.month):
        return min(today.day, info.days_in_month)
    return info.days_in_month


def days_until_feb1(today: date) -> Optional[int]:
    feb1 = date(today.year, 2, 1)
    if today >= feb1:
        return None
    return (feb1 - today).days


# --- Aggregation --------------------------------------------------------------

@dataclass(frozen=True)
class DayAgg:
    complete: int = 0
    partial: int = 0
    checked_in: int = 0
    total: int = 0

    def bump(self, status: str, delta: int = 1) -> "DayAgg":
        return replace(self, **{status: max(0, getattr(self, status) + delta)})


def aggregate_by_day(rows: Iterable[Mapping]) -> Tuple[Dict[str, DayAgg], Dict[str, Dict[int, str]]]:
    """
    Check-in rows -> (day -> DayAgg, day -> goal id -> status).
    """
    by_day: Dict[str, DayAgg] = {}
    statuses: Dict[str, Dict[int, str]] = {}
    for r in rows:
        d = r["checkin_date"]
        st = r["status"]
        agg = by_day.get(d, DayAgg())
        by_day[d] = replace(agg.bump(st), total=agg.total + 1)
        statuses.setdefault(d, {})[r["user_goal_id"]] = st
    return by_day, statuses


def history_by_goal(rows: Iterable[Mapping]) -> Dict[int, Dict[str, str]]:
    out: Dict[int, Dict[str, str]] = {}
    for r in rows:
        out.setdefault(r["user_goal_id"], {})[r["checkin_date"]] = r["status"]
    return out


def dominant_tone(agg: Optional[DayAgg]) -> str:
    if agg is None or agg.total == 0:
        return "empty"
    c, p, ci = agg.complete, agg.partial, agg.checked_in
    if c >= p and c >= ci:
        return "complete"
    if p >= c and p >= ci:
        return "partial"
    return "checked_in"


def apply_status(
    statuses: Mapping[str, Mapping[int, str]],
    by_day: Mapping[str, DayAgg],
    day: str,
    goal_id: int,
    status: str,
) -> Tuple[Dict[str, Dict[int, str]], Dict[str, DayAgg]]:
    """
    Optimistic update for one (day, goal) cell.

    A changed status moves the count between buckets; a new check-in grows
    the day's total. Inputs are left untouched.
    """
    prev_status = statuses.get(day, {}).get(goal_id)
    stats = by_day.get(day, DayAgg())
    if prev_status:
        stats = stats.bump(prev_status, -1)
    else:
        stats = replace(stats, total=stats.total + 1)
    stats = stats.bump(status)

    next_statuses = {d: dict(m) for d, m in statuses.items()}
    next_statuses.setdefault(day, {})[goal_id] = status
    next_by_day = dict(by_day)
    next_by_day[day] = stats
    return next_statuses, next_by_day


def set_history_status(
    history: Mapping[int, Mapping[str, str]], goal_id: int, day: str, status: str
) -> Dict[int, Dict[str, str]]:
    out = {g: dict(m) for g, m in history.items()}
    out.setdefault(goal_id, {})[day] = status
    return out


def all_checked_in(goal_ids: Sequence[int], today_map: Mapping[int, Optional[str]]) -> bool:
    return len(goal_ids) > 0 and all(today_map.get(g) for g in goal_ids)


# --- Summaries ----------------------------------------------------------------

def month_summary(by_day: Mapping[str, DayAgg]) -> Dict[str, int]:
    return {
        "days_with_checkin": len(by_day),
        "total_checkins": sum(a.total for a in by_day.values()),
    }


def goal_month_summary(status_by_day: Mapping[str, str], elapsed: int) -> Dict[str, int]:
    """
    One goal's month: days checked in, per-status counts, % of elapsed days.
    """
    counts = {s: 0 for s in STATUSES}
    for st in status_by_day.values():
        if st in counts:
            counts[st] += 1
    days = len(status_by_day)
    # half-up, so 12.5% shows as 13%
    pct = math.floor(days / elapsed * 100 + 0.5) if elapsed else 0
    return {"days_with_checkin": days, "percent": pct, **counts}


# --- Calendar frames ----------------------------------------------------------

def _grid_rows(info: MonthInfo):
    for d in daterange(info.start, info.end):
        slot = info.first_weekday + d.day - 1
        yield d, slot // 7, slot % 7


def calendar_frame(by_day: Mapping[str, DayAgg], info: MonthInfo) -> pd.DataFrame:
    """
    Sunday-first month grid for the heatmap.

    Columns:
      - day (date), day_num, week (row), dow (0 = Sunday)
      - tone (dominant status or 'empty'), total
    """
    rows = []
    for d, week, dow in _grid_rows(info):
        agg = by_day.get(d.isoformat())
        rows.append(
            {
                "day": d,
                "day_num": d.day,
                "week": week,
                "dow": dow,
                "weekday": WEEKDAY_NAMES[dow],
                "tone": dominant_tone(agg),
                "total": agg.total if agg else 0,
            }
        )
    return pd.DataFrame(rows)


def goal_calendar_frame(status_by_day: Mapping[str, str], info: MonthInfo) -> pd.DataFrame:
    rows = []
    for d, week, dow in _grid_rows(info):
        st = status_by_day.get(d.isoformat())
        rows.append(
            {
                "day": d,
                "day_num": d.day,
                "week": week,
                "dow": dow,
                "weekday": WEEKDAY_NAMES[dow],
                "tone": st or "empty",
            }
        )
    return pd.DataFrame(rows)
