"""
UI helpers shared across pages (Streamlit).

Keeping this separate avoids repeating small formatting bits.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime

import streamlit as st

from beyond_january import db
from beyond_january.config import Settings, get_settings
from beyond_january.errors import BeyondJanuaryError
from beyond_january.logging_config import setup_logging
from beyond_january.metrics import status_label

logger = logging.getLogger(__name__)

STATUS_BUTTONS = [
    ("complete", "✅ Complete"),
    ("partial", "🟨 Partial"),
    ("checked_in", "🤝 Checked in"),
]

STATUS_COLORS = {
    "complete": "#4ade80",
    "partial": "#fde047",
    "checked_in": "#60a5fa",
    "empty": "#3f3f46",
}

STATUS_DOTS = {
    "complete": "🟢",
    "partial": "🟡",
    "checked_in": "🔵",
}


def bootstrap() -> Settings:
    """
    Run at the top of every page: logging, schema, settings.
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db.init_db()
    return settings


def app_header(title: str, subtitle: str | None = None) -> None:
    st.title(title)
    if subtitle:
        st.caption(subtitle)


def signed_in_as() -> None:
    st.caption(f"Signed in as {db.get_display_name() or '—'}")


def now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def status_dot(status: str | None) -> str:
    return STATUS_DOTS.get(status or "", "⚫")


def pretty_status(status: str | None) -> str:
    return status_label(status) if status else "No check-in"


def pretty_day(day_iso: str) -> str:
    d = date.fromisoformat(day_iso)
    return f"{d:%a, %b} {d.day}"


def toast_success(msg: str) -> None:
    st.toast(msg, icon="✅")


def toast_error(msg: str) -> None:
    st.toast(msg, icon="⚠️")


def report_error(action: str, exc: BeyondJanuaryError | sqlite3.Error) -> None:
    """
    Log a failed store call and show its message. Domain errors carry a
    user-facing message; anything else gets a generic one.
    """
    if isinstance(exc, BeyondJanuaryError):
        logger.warning("%s failed: %s", action, exc)
        st.error(str(exc))
    else:
        logger.error("%s failed: %s", action, exc)
        st.error(f"Could not {action.lower()}. Please try again.")


VIEW_KEYS = ("today_goals", "today_history", "progress_view")


def invalidate_views() -> None:
    """
    Drop page data kept in session state so the next run reloads it.
    """
    for key in VIEW_KEYS:
        st.session_state.pop(key, None)
