"""
SQLite layer for goals, check-ins and notes.

The app keeps a small schema on disk so data survives restarts. Functions
take an optional `db_path`; when omitted the configured path is used.
"""

from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Iterable, List, Optional, Sequence

from beyond_january.config import get_settings
from beyond_january.errors import GoalNotFoundError, GoalSelectionError, InvalidStatusError
from beyond_january.metrics import STATUSES, is_valid_status

logger = logging.getLogger(__name__)

# (category, title, default cadence)
TEMPLATE_CATALOG = [
    ("Health & Fitness", "Move for 20 minutes", "daily"),
    ("Health & Fitness", "Run or walk", "daily"),
    ("Health & Fitness", "Strength training", "weekly"),
    ("Sleep & Routine", "Early bedtime", "daily"),
    ("Sleep & Routine", "Morning routine", "daily"),
    ("Learning & Career", "Read 10 pages", "daily"),
    ("Learning & Career", "Practice a skill", "daily"),
    ("Learning & Career", "Study session", "weekly"),
    ("Mind & Mental Health", "Meditate", "daily"),
    ("Mind & Mental Health", "Journal", "daily"),
    ("Nutrition & Wellness", "Drink water", "daily"),
    ("Nutrition & Wellness", "Cook a real meal", "weekly"),
    ("Creativity", "Work on my project", "daily"),
    ("Creativity", "Draw or write something", "weekly"),
    ("Relationships", "Call family", "weekly"),
    ("Relationships", "Reach out to a friend", "weekly"),
    ("Life Admin", "Plan tomorrow", "daily"),
    ("Life Admin", "Clean one thing", "daily"),
    ("Digital Wellness", "Phone-free hour", "daily"),
    ("Digital Wellness", "No social media before noon", "daily"),
    ("Habits & Boundaries", "Say no to one thing", "weekly"),
    ("Habits & Boundaries", "Stop work on time", "daily"),
]

CATEGORY_EMOJI = {
    "Health & Fitness": "🏃‍♀️",
    "Sleep & Routine": "🛌",
    "Learning & Career": "📚",
    "Mind & Mental Health": "🧠",
    "Nutrition & Wellness": "🥗",
    "Creativity": "🎨",
    "Relationships": "🤝",
    "Life Admin": "✅",
    "Digital Wellness": "📵",
    "Habits & Boundaries": "🧩",
}

_GOAL_SELECT = """
    SELECT g.id, g.goal_template_id, g.custom_title, g.cadence, g.share_level,
           g.active, g.created_at,
           t.title AS template_title, t.category AS template_category
      FROM user_goals g
      JOIN goal_templates t ON t.id = g.goal_template_id
"""


def _resolve(db_path: Optional[str]) -> str:
    return db_path or get_settings().db_path


def _ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


@contextmanager
def connect(db_path: Optional[str] = None):
    path = _resolve(db_path)
    _ensure_parent_dir(path)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def _goal_view(row: sqlite3.Row) -> dict:
    g = dict(row)
    g["active"] = bool(g["active"])
    g["title"] = g["custom_title"] or g["template_title"]
    return g


def init_db(db_path: Optional[str] = None) -> None:
    """
    Create tables if they don't exist yet and seed the template catalog.
    """
    status_list = ", ".join(f"'{s}'" for s in STATUSES)
    with connect(db_path) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS goal_templates (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                category TEXT NOT NULL,
                default_cadence TEXT NOT NULL DEFAULT 'daily',
                UNIQUE(title, category)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS user_goals (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                goal_template_id INTEGER NOT NULL UNIQUE,
                custom_title TEXT,
                cadence TEXT NOT NULL DEFAULT 'daily',
                share_level TEXT NOT NULL DEFAULT 'private',
                active INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL,
                FOREIGN KEY (goal_template_id) REFERENCES goal_templates(id)
            )
            """
        )
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS checkins (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_goal_id INTEGER NOT NULL,
                checkin_date TEXT NOT NULL,         -- YYYY-MM-DD
                status TEXT NOT NULL CHECK (status IN ({status_list})),
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                UNIQUE(user_goal_id, checkin_date),
                FOREIGN KEY (user_goal_id) REFERENCES user_goals(id) ON DELETE CASCADE
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS user_notes (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                general_notes TEXT NOT NULL DEFAULT '',
                long_term_goals TEXT NOT NULL DEFAULT '',
                updated_at TEXT
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS goal_notes (
                user_goal_id INTEGER PRIMARY KEY,
                why TEXT NOT NULL DEFAULT '',
                when_hard TEXT NOT NULL DEFAULT '',
                updated_at TEXT,
                FOREIGN KEY (user_goal_id) REFERENCES user_goals(id) ON DELETE CASCADE
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """
        )

        conn.executemany(
            """
            INSERT OR IGNORE INTO goal_templates (category, title, default_cadence)
            VALUES (?, ?, ?)
            """,
            TEMPLATE_CATALOG,
        )


# --- Templates ----------------------------------------------------------------

def list_templates(query: str = "", db_path: Optional[str] = None) -> List[dict]:
    with connect(db_path) as conn:
        rows = conn.execute(
            "SELECT id, title, category, default_cadence FROM goal_templates ORDER BY category, title"
        ).fetchall()
    templates = [dict(r) for r in rows]
    q = (query or "").strip().lower()
    if not q:
        return templates
    return [t for t in templates if q in t["title"].lower() or q in t["category"].lower()]


def get_templates(template_ids: Iterable[int], db_path: Optional[str] = None) -> List[dict]:
    ids = list(template_ids)
    if not ids:
        return []
    marks = ",".join("?" for _ in ids)
    with connect(db_path) as conn:
        rows = conn.execute(
            f"SELECT id, title, category, default_cadence FROM goal_templates WHERE id IN ({marks}) ORDER BY id",
            ids,
        ).fetchall()
    return [dict(r) for r in rows]


# --- Goals --------------------------------------------------------------------

def list_active_goals(db_path: Optional[str] = None) -> List[dict]:
    with connect(db_path) as conn:
        rows = conn.execute(
            _GOAL_SELECT + " WHERE g.active = 1 ORDER BY g.created_at, g.id"
        ).fetchall()
    return [_goal_view(r) for r in rows]


def get_goal(goal_id: int, db_path: Optional[str] = None) -> Optional[dict]:
    with connect(db_path) as conn:
        row = conn.execute(_GOAL_SELECT + " WHERE g.id = ?", (goal_id,)).fetchone()
    return _goal_view(row) if row else None


def add_goals(
    template_ids: Sequence[int],
    created_at: str,
    limit: Optional[int] = None,
    db_path: Optional[str] = None,
) -> None:
    """
    Start tracking the chosen templates.

    Re-adding a removed goal re-activates it (same id, history kept) and
    resets its custom title.
    """
    if limit is None:
        limit = get_settings().max_active_goals
    chosen = sorted(set(template_ids))
    if not chosen:
        raise GoalSelectionError("Pick at least 1 goal to continue.")

    templates = get_templates(chosen, db_path=db_path)
    if len(templates) != len(chosen):
        known = {t["id"] for t in templates}
        missing = [i for i in chosen if i not in known]
        raise GoalSelectionError(f"Unknown goal template(s): {missing}")

    with connect(db_path) as conn:
        active = {
            r["goal_template_id"]
            for r in conn.execute("SELECT goal_template_id FROM user_goals WHERE active = 1")
        }
        if len(active | set(chosen)) > limit:
            raise GoalSelectionError(f"You can pick up to {limit} goals for now.")

        conn.executemany(
            """
            INSERT INTO user_goals (goal_template_id, custom_title, cadence, share_level, active, created_at)
            VALUES (?, NULL, ?, 'private', 1, ?)
            ON CONFLICT(goal_template_id) DO UPDATE SET
                active=1,
                cadence=excluded.cadence,
                share_level=excluded.share_level,
                custom_title=NULL
            """,
            [(t["id"], t["default_cadence"] or "daily", created_at) for t in templates],
        )
    logger.info("Goals added: templates=%s", chosen)


def deactivate_goal(goal_id: int, db_path: Optional[str] = None) -> None:
    with connect(db_path) as conn:
        cur = conn.execute("UPDATE user_goals SET active = 0 WHERE id = ?", (goal_id,))
    if cur.rowcount == 0:
        raise GoalNotFoundError(f"No goal with id {goal_id}")
    logger.info("Goal removed: id=%s", goal_id)


def rename_goal(goal_id: int, title: str, db_path: Optional[str] = None) -> None:
    """
    Set a custom title. A title equal to the template title is stored as NULL.
    """
    new_title = (title or "").strip()
    if not new_title:
        raise GoalSelectionError("Goal name can't be empty.")
    goal = get_goal(goal_id, db_path=db_path)
    if goal is None:
        raise GoalNotFoundError(f"No goal with id {goal_id}")
    value = None if new_title == goal["template_title"] else new_title
    with connect(db_path) as conn:
        conn.execute("UPDATE user_goals SET custom_title = ? WHERE id = ?", (value, goal_id))
    logger.info("Goal renamed: id=%s custom=%s", goal_id, value is not None)


# --- Check-ins ----------------------------------------------------------------

def upsert_checkin(
    goal_id: int,
    day: str,
    status: str,
    now: str,
    db_path: Optional[str] = None,
) -> None:
    """
    Create or update the check-in for (goal, day).
    """
    if not is_valid_status(status):
        raise InvalidStatusError(f"Unknown check-in status: {status!r}")
    with connect(db_path) as conn:
        conn.execute(
            """
            INSERT INTO checkins (user_goal_id, checkin_date, status, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(user_goal_id, checkin_date) DO UPDATE SET
                status=excluded.status,
                updated_at=excluded.updated_at
            """,
            (goal_id, day, status, now, now),
        )
    logger.info("Check-in saved: goal=%s day=%s status=%s", goal_id, day, status)


def list_checkins_between(
    start_day: str,
    end_day: str,
    goal_ids: Optional[Sequence[int]] = None,
    db_path: Optional[str] = None,
) -> List[dict]:
    """
    Return check-ins where start_day <= day <= end_day (inclusive),
    optionally limited to some goals.
    """
    sql = """
        SELECT user_goal_id, checkin_date, status
          FROM checkins
         WHERE checkin_date >= ? AND checkin_date <= ?
    """
    params: list = [start_day, end_day]
    if goal_ids is not None:
        if not goal_ids:
            return []
        sql += " AND user_goal_id IN ({})".format(",".join("?" for _ in goal_ids))
        params.extend(goal_ids)
    sql += " ORDER BY checkin_date, user_goal_id"
    with connect(db_path) as conn:
        rows = conn.execute(sql, params).fetchall()
    return [dict(r) for r in rows]


def list_checkins_for_goal(
    goal_id: int, start_day: str, end_day: str, db_path: Optional[str] = None
) -> List[dict]:
    return list_checkins_between(start_day, end_day, [goal_id], db_path=db_path)


# --- Notes --------------------------------------------------------------------

def get_user_notes(db_path: Optional[str] = None) -> dict:
    with connect(db_path) as conn:
        row = conn.execute(
            "SELECT general_notes, long_term_goals, updated_at FROM user_notes WHERE id = 1"
        ).fetchone()
    if row is None:
        return {"general_notes": "", "long_term_goals": "", "updated_at": None}
    return dict(row)


def save_user_notes(general_notes: str, long_term_goals: str, now: str, db_path: Optional[str] = None) -> None:
    with connect(db_path) as conn:
        conn.execute(
            """
            INSERT INTO user_notes (id, general_notes, long_term_goals, updated_at)
            VALUES (1, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                general_notes=excluded.general_notes,
                long_term_goals=excluded.long_term_goals,
                updated_at=excluded.updated_at
            """,
            (general_notes.strip(), long_term_goals.strip(), now),
        )
    logger.info("User notes saved")


def get_goal_notes(goal_id: int, db_path: Optional[str] = None) -> dict:
    with connect(db_path) as conn:
        row = conn.execute(
            "SELECT why, when_hard, updated_at FROM goal_notes WHERE user_goal_id = ?",
            (goal_id,),
        ).fetchone()
    if row is None:
        return {"why": "", "when_hard": "", "updated_at": None}
    return dict(row)


def save_goal_notes(goal_id: int, why: str, when_hard: str, now: str, db_path: Optional[str] = None) -> None:
    if get_goal(goal_id, db_path=db_path) is None:
        raise GoalNotFoundError(f"No goal with id {goal_id}")
    with connect(db_path) as conn:
        conn.execute(
            """
            INSERT INTO goal_notes (user_goal_id, why, when_hard, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(user_goal_id) DO UPDATE SET
                why=excluded.why,
                when_hard=excluded.when_hard,
                updated_at=excluded.updated_at
            """,
            (goal_id, why.strip(), when_hard.strip(), now),
        )
    logger.info("Goal notes saved: goal=%s", goal_id)


# --- Settings -----------------------------------------------------------------

def get_setting(key: str, default: str = "", db_path: Optional[str] = None) -> str:
    with connect(db_path) as conn:
        row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
    return str(row["value"]) if row else default


def set_setting(key: str, value: str, db_path: Optional[str] = None) -> None:
    with connect(db_path) as conn:
        conn.execute(
            """
            INSERT INTO settings (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value
            """,
            (key, str(value)),
        )


def get_display_name(db_path: Optional[str] = None) -> str:
    return get_setting("display_name", "", db_path=db_path)


def set_display_name(name: str, db_path: Optional[str] = None) -> None:
    set_setting("display_name", name.strip(), db_path=db_path)
