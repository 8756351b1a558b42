"""
Goals page

Pick goals from the template catalog (up to 5 at a time), rename or remove
the ones you track, and set the name shown around the app.
"""

from __future__ import annotations

import sqlite3
from itertools import groupby

import streamlit as st

from beyond_january import db
from beyond_january.errors import BeyondJanuaryError
from beyond_january.ui_helpers import (
    app_header,
    bootstrap,
    invalidate_views,
    now_iso,
    report_error,
    toast_success,
)

st.set_page_config(page_title="Goals", page_icon="🎯", layout="wide")
settings = bootstrap()


def render_active(goals: list[dict]) -> None:
    st.subheader("Your goals")
    if not goals:
        st.info("No goals yet.")
        return

    for g in goals:
        cols = st.columns([0.75, 0.25])
        with cols[0]:
            st.write(f"**{g['title']}**")
            st.caption(f"{g['template_category']} · {g['cadence']}")
        with cols[1]:
            if st.button("Edit", key=f"edit_{g['id']}"):
                st.session_state["edit_id"] = g["id"]
                st.rerun()

    edit_id = st.session_state.get("edit_id")
    goal = next((g for g in goals if g["id"] == edit_id), None)
    if goal is None:
        return

    st.divider()
    st.markdown(f"#### Edit goal · {goal['template_category']}")
    new_title = st.text_input("Name", value=goal["title"], key=f"title_{goal['id']}")
    st.caption(f"Template name: {goal['template_title']}")
    save_col, del_col = st.columns([0.6, 0.4])
    with save_col:
        if st.button("Save", type="primary"):
            try:
                db.rename_goal(goal["id"], new_title)
            except (BeyondJanuaryError, sqlite3.Error) as e:
                report_error("Rename goal", e)
            else:
                invalidate_views()
                st.session_state["edit_id"] = None
                toast_success("Goal updated")
                st.rerun()
    with del_col:
        if st.button("Remove", help="Stops tracking. History is kept if you add it again."):
            try:
                db.deactivate_goal(goal["id"])
            except (BeyondJanuaryError, sqlite3.Error) as e:
                report_error("Remove goal", e)
            else:
                invalidate_views()
                st.session_state["edit_id"] = None
                toast_success("Goal removed")
                st.rerun()


def render_catalog(goals: list[dict]) -> None:
    st.subheader("Interests")
    st.caption(
        f"Pick up to {settings.max_active_goals} goals to track. "
        "You can change them and customize them later."
    )

    active_templates = {g["goal_template_id"] for g in goals}
    query = st.text_input("Search", placeholder="e.g. sleep, reading, water")
    templates = db.list_templates(query)
    if not templates:
        st.caption("Nothing matches that search.")
        return

    chosen: list[int] = []
    for category, group in groupby(templates, key=lambda t: t["category"]):
        st.markdown(f"**{db.CATEGORY_EMOJI.get(category, '•')} {category}**")
        for t in group:
            if t["id"] in active_templates:
                st.checkbox(t["title"], value=True, disabled=True, key=f"active_tmpl_{t['id']}")
            elif st.checkbox(t["title"], key=f"tmpl_{t['id']}"):
                chosen.append(t["id"])

    picked = len(active_templates) + len(chosen)
    st.caption(f"{picked} / {settings.max_active_goals} selected")
    if st.button("Continue", type="primary", disabled=not chosen):
        try:
            db.add_goals(chosen, now_iso())
        except (BeyondJanuaryError, sqlite3.Error) as e:
            report_error("Save goals", e)
        else:
            invalidate_views()
            toast_success("Goals saved")
            st.switch_page("pages/1_Today.py")


def render_profile() -> None:
    with st.expander("Profile"):
        name = st.text_input("Display name", value=db.get_display_name())
        if st.button("Save name"):
            db.set_display_name(name)
            toast_success("Saved")


def main() -> None:
    app_header("Goals", "Choose what you want to show up for.")

    goals = db.list_active_goals()
    left, right = st.columns([0.9, 1.1], gap="large")
    with left:
        render_active(goals)
        st.divider()
        render_profile()
    with right:
        render_catalog(goals)


if __name__ == "__main__":
    main()
