"""
Progress page

Month calendar of check-ins. Each day is tinted by its most common status;
pick a day to see (and fix) what was logged, or pick a goal for its own month.
"""

from __future__ import annotations

import sqlite3
from datetime import date

import altair as alt
import pandas as pd
import streamlit as st

from beyond_january import db
from beyond_january.errors import BeyondJanuaryError
from beyond_january.metrics import (
    add_months,
    aggregate_by_day,
    apply_status,
    calendar_frame,
    daterange,
    days_elapsed,
    days_until_feb1,
    goal_calendar_frame,
    goal_month_summary,
    month_info,
    month_summary,
    month_to_param,
    parse_day_param,
    parse_month_param,
)
from beyond_january.ui_helpers import (
    STATUS_BUTTONS,
    STATUS_COLORS,
    app_header,
    bootstrap,
    now_iso,
    pretty_day,
    pretty_status,
    report_error,
    signed_in_as,
)

st.set_page_config(page_title="Progress", page_icon="📈", layout="wide")
bootstrap()


def go_to_month(year: int, month: int) -> None:
    st.session_state.pop("open_day", None)
    st.query_params.clear()
    st.query_params["m"] = month_to_param(year, month)


def load_view(month_param: str, start_iso: str, end_iso: str) -> dict:
    view = st.session_state.get("progress_view")
    if view and view["m"] == month_param:
        return view
    goals = db.list_active_goals()
    rows = db.list_checkins_between(start_iso, end_iso, [g["id"] for g in goals])
    by_day, statuses = aggregate_by_day(rows)
    view = {"m": month_param, "goals": goals, "by_day": by_day, "statuses": statuses}
    st.session_state["progress_view"] = view
    return view


def heatmap(frame: pd.DataFrame) -> alt.LayerChart:
    tones = list(STATUS_COLORS)
    base = alt.Chart(frame).encode(
        x=alt.X("weekday:O", sort=["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"], title=None),
        y=alt.Y("week:O", title=None, axis=None),
    )
    cells = base.mark_rect(cornerRadius=6).encode(
        color=alt.Color(
            "tone:N",
            scale=alt.Scale(domain=tones, range=[STATUS_COLORS[t] for t in tones]),
            legend=alt.Legend(title=None, orient="bottom"),
        ),
        tooltip=[alt.Tooltip("day:T", title="Day"), "tone:N"],
    )
    labels = base.mark_text(baseline="middle").encode(text="day_num:Q")
    return cells + labels


def close_day() -> None:
    st.session_state["open_day"] = None
    st.query_params.pop("day", None)


def render_day_drawer(view: dict, day: str) -> None:
    with st.container(border=True):
        top, close = st.columns([0.8, 0.2])
        top.subheader(pretty_day(day))
        close.button("Close", on_click=close_day)

        if day > date.today().isoformat():
            st.caption("This day hasn't happened yet.")
            return

        day_statuses = view["statuses"].get(day, {})
        for g in view["goals"]:
            current = day_statuses.get(g["id"])
            st.write(f"**{g['title']}** · {pretty_status(current)}")
            cols = st.columns(len(STATUS_BUTTONS))
            for col, (status, label) in zip(cols, STATUS_BUTTONS):
                with col:
                    if st.button(label, key=f"inline_{day}_{g['id']}_{status}"):
                        statuses, by_day = apply_status(view["statuses"], view["by_day"], day, g["id"], status)
                        try:
                            db.upsert_checkin(g["id"], day, status, now_iso())
                        except (BeyondJanuaryError, sqlite3.Error) as e:
                            st.session_state.pop("progress_view", None)
                            report_error("Save check-in", e)
                        else:
                            view.update(statuses=statuses, by_day=by_day)
                            st.session_state.pop("today_goals", None)
                            st.rerun()


def render_goal_month(view: dict, goal_id: int, info, today: date) -> None:
    goal = next((g for g in view["goals"] if g["id"] == goal_id), None)
    if goal is None:
        st.warning("That goal isn't active anymore.")
        return

    status_by_day = {d: m[goal_id] for d, m in view["statuses"].items() if goal_id in m}
    summary = goal_month_summary(status_by_day, days_elapsed(info, today))

    with st.container(border=True):
        st.subheader(goal["title"])
        st.caption(goal["template_category"])
        st.write(f"{summary['days_with_checkin']} check-ins · {summary['percent']}% of days (so far)")
        st.caption("Showing up counts. “Checked in” is progress.")
        c1, c2, c3 = st.columns(3)
        c1.metric("Complete", summary["complete"])
        c2.metric("Partial", summary["partial"])
        c3.metric("Checked in", summary["checked_in"])
        st.altair_chart(heatmap(goal_calendar_frame(status_by_day, info)), width="stretch")

        notes = db.get_goal_notes(goal_id)
        has_notes = bool(notes["why"] or notes["when_hard"])
        with st.expander("Notes", expanded=has_notes):
            if has_notes:
                st.write(f"**Why:** {notes['why'] or '—'}")
                st.write(f"**When it gets hard:** {notes['when_hard'] or '—'}")
            else:
                st.caption("No notes for this goal yet.")
            st.page_link("pages/4_Notes.py", label="Edit notes")


def main() -> None:
    today = date.today()
    target = parse_month_param(st.query_params.get("m")) or (today.year, today.month)
    info = month_info(*target)
    month_param = month_to_param(*target)

    app_header("Progress", info.label)
    signed_in_as()

    to_feb = days_until_feb1(today)
    if to_feb is not None:
        with st.container(border=True):
            st.write("**February 1 is the start of the Beyond January movement**")
            st.caption("January counts. February is where we collectively reset expectations and focus on consistency.")
            st.caption(f"Starts in {to_feb} day{'' if to_feb == 1 else 's'}.")
            if st.button("View Feb"):
                go_to_month(today.year, 2)
                st.rerun()

    prev_col, _, next_col = st.columns([0.2, 0.6, 0.2])
    if prev_col.button("← Prev"):
        go_to_month(*add_months(*target, -1))
        st.rerun()
    if next_col.button("Next →"):
        go_to_month(*add_months(*target, 1))
        st.rerun()

    try:
        view = load_view(month_param, info.start_iso, info.end_iso)
    except sqlite3.Error as e:
        report_error("Load progress", e)
        return

    if not view["goals"]:
        st.info("No goals yet. Pick some in **Goals** to see your month.")
        return

    summary = month_summary(view["by_day"])
    c1, c2, c3 = st.columns(3)
    c1.metric("Days with a check-in", f"{summary['days_with_checkin']} / {days_elapsed(info, today)}")
    c2.metric("Check-ins", summary["total_checkins"])
    c3.metric("Goals", len(view["goals"]))

    st.altair_chart(heatmap(calendar_frame(view["by_day"], info)), width="stretch")

    days = [d.isoformat() for d in daterange(info.start, info.end)]
    linked = parse_day_param(st.query_params.get("day"))
    if st.session_state.get("open_day") not in (None, *days):
        st.session_state.pop("open_day")
    if "open_day" not in st.session_state and linked in days:
        st.session_state["open_day"] = linked
    selected_day = st.selectbox(
        "Open a day",
        options=[None, *days],
        format_func=lambda d: "—" if d is None else pretty_day(d),
        key="open_day",
    )
    if selected_day:
        render_day_drawer(view, selected_day)

    st.divider()
    goal_id = st.selectbox(
        "Goal month",
        options=[None, *[g["id"] for g in view["goals"]]],
        format_func=lambda gid: "—" if gid is None else next(g["title"] for g in view["goals"] if g["id"] == gid),
    )
    if goal_id is not None:
        render_goal_month(view, goal_id, info, today)


if __name__ == "__main__":
    main()
