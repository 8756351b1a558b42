"""
Today page

Set today's status for each goal: complete, partial, or just checked in.
Earlier days can be backfilled from the same page.
"""

from __future__ import annotations

import sqlite3
from datetime import date, timedelta

import streamlit as st

from beyond_january import db
from beyond_january.errors import BeyondJanuaryError
from beyond_january.metrics import add_days, all_checked_in, history_by_goal, last_n_days, set_history_status
from beyond_january.ui_helpers import (
    STATUS_BUTTONS,
    app_header,
    bootstrap,
    invalidate_views,
    now_iso,
    pretty_day,
    pretty_status,
    report_error,
    signed_in_as,
    status_dot,
    toast_success,
)

st.set_page_config(page_title="Today", page_icon="✅", layout="wide")
bootstrap()


def load_state(today: date) -> None:
    goals = db.list_active_goals()
    days = last_n_days(today)
    rows = db.list_checkins_between(days[0], days[-1], [g["id"] for g in goals])
    st.session_state["today_goals"] = goals
    st.session_state["today_history"] = history_by_goal(rows)
    st.session_state["today_loaded_for"] = today.isoformat()


def save_status(goal_id: int, day: str, status: str) -> bool:
    # Optimistic: show the new status right away, reload if the write fails.
    st.session_state["today_history"] = set_history_status(
        st.session_state["today_history"], goal_id, day, status
    )
    try:
        db.upsert_checkin(goal_id, day, status, now_iso())
    except (BeyondJanuaryError, sqlite3.Error) as e:
        invalidate_views()
        report_error("Save check-in", e)
        return False
    st.session_state.pop("progress_view", None)
    toast_success("Saved")
    return True


def render_goal(goal: dict, today_iso: str, days: list[str]) -> None:
    history = st.session_state["today_history"].get(goal["id"], {})
    current = history.get(today_iso)

    with st.container(border=True):
        top, menu = st.columns([0.8, 0.2])
        with top:
            st.write(f"**{goal['title']}**")
            st.caption(f"{goal['template_category']} · {goal['cadence']}")
        with menu:
            with st.popover("⋯"):
                st.page_link("pages/3_Goals.py", label="Rename goal")
                if st.button("Backfill", key=f"backfill_{goal['id']}"):
                    st.session_state["backfill_for"] = goal["id"]
                    st.rerun()
                if st.button("Remove goal", key=f"remove_{goal['id']}"):
                    try:
                        db.deactivate_goal(goal["id"])
                    except (BeyondJanuaryError, sqlite3.Error) as e:
                        report_error("Remove goal", e)
                    else:
                        invalidate_views()
                        st.rerun()

        st.write(" ".join(status_dot(history.get(d)) for d in days))

        if current and not st.session_state.get(f"edit_{goal['id']}"):
            left, right = st.columns([0.7, 0.3])
            left.write(pretty_status(current))
            if right.button("Change", key=f"change_{goal['id']}"):
                st.session_state[f"edit_{goal['id']}"] = True
                st.rerun()
            return

        cols = st.columns(len(STATUS_BUTTONS))
        for col, (status, label) in zip(cols, STATUS_BUTTONS):
            with col:
                if st.button(label, key=f"{status}_{goal['id']}", type="primary" if status == current else "secondary"):
                    if save_status(goal["id"], today_iso, status):
                        st.session_state[f"edit_{goal['id']}"] = False
                        st.rerun()


def render_backfill(goals: list[dict], today: date) -> None:
    goal_id = st.session_state.get("backfill_for")
    goal = next((g for g in goals if g["id"] == goal_id), None)
    if goal is None:
        return

    with st.container(border=True):
        st.subheader(f"Backfill · {goal['title']}")
        anchor = st.date_input(
            "Date",
            value=today - timedelta(days=1),
            max_value=today,
            key="backfill_date",
        )
        anchor_iso = anchor.isoformat()
        stack = [add_days(anchor_iso, -i) for i in range(3)]
        rows = db.list_checkins_for_goal(goal["id"], stack[-1], stack[0])
        known = {r["checkin_date"]: r["status"] for r in rows}

        for day in stack:
            st.write(f"**{pretty_day(day)}** · {pretty_status(known.get(day))}")
            cols = st.columns(len(STATUS_BUTTONS))
            for col, (status, label) in zip(cols, STATUS_BUTTONS):
                with col:
                    if st.button(label, key=f"bf_{day}_{status}"):
                        if save_status(goal["id"], day, status):
                            st.rerun()

        if st.button("Done", key=f"bf_close_{anchor_iso}"):
            st.session_state["backfill_for"] = None
            st.rerun()


def main() -> None:
    today = date.today()
    today_iso = today.isoformat()
    app_header("Today", f"Date: {today_iso}")
    signed_in_as()

    if "today_goals" not in st.session_state or st.session_state.get("today_loaded_for") != today_iso:
        try:
            load_state(today)
        except sqlite3.Error as e:
            report_error("Load goals", e)
            return

    goals = st.session_state["today_goals"]
    if not goals:
        st.info("No goals yet. Pick some in **Goals**.")
        st.page_link("pages/3_Goals.py", label="Pick goals", icon="🎯")
        return

    history = st.session_state["today_history"]
    today_map = {g["id"]: history.get(g["id"], {}).get(today_iso) for g in goals}
    if all_checked_in([g["id"] for g in goals], today_map):
        st.success("All checked in today. That's consistency.")

    days = last_n_days(today)
    for g in goals:
        render_goal(g, today_iso, days)

    render_backfill(goals, today)


if __name__ == "__main__":
    main()
