"""
Notes page

Free-form reflection: general notes, long-term goals, and for each goal the
reason it matters and what to do when it gets hard.
"""

from __future__ import annotations

import sqlite3

import streamlit as st

from beyond_january import db
from beyond_january.errors import BeyondJanuaryError
from beyond_january.ui_helpers import app_header, bootstrap, now_iso, report_error, toast_success

st.set_page_config(page_title="Notes", page_icon="📝", layout="wide")
bootstrap()

PANELS = {
    "general": "General",
    "long_term": "Long-term goals",
    "goal_whys": "Goal whys",
}

PROMPTS = {
    "general": [
        "What did I do well lately (even if small)?",
        "What made this week harder than expected?",
        "What's one tiny adjustment that would make tomorrow easier?",
    ],
    "long_term": [
        "What kind of person am I becoming this year?",
        "What do I want my life to look like in 12-24 months?",
        "What do I want to protect (energy, health, relationships, craft)?",
    ],
    "goal_whys": [
        "Why does this goal matter to me (not to others)?",
        "What will I do on the days it feels hard?",
        "What does a 'good enough' day look like for this goal?",
    ],
}


def render_prompts(panel: str) -> None:
    with st.expander("Prompts"):
        for p in PROMPTS[panel]:
            st.caption(f"• {p}")


def render_user_notes(panel: str) -> None:
    notes = db.get_user_notes()
    field = "general_notes" if panel == "general" else "long_term_goals"
    text = st.text_area(PANELS[panel], value=notes[field], height=240, key=f"notes_{panel}")
    if notes["updated_at"]:
        st.caption(f"Last saved {notes['updated_at']}")
    if st.button("Save", type="primary", key=f"save_{panel}"):
        values = {"general_notes": notes["general_notes"], "long_term_goals": notes["long_term_goals"], field: text}
        try:
            db.save_user_notes(values["general_notes"], values["long_term_goals"], now_iso())
        except sqlite3.Error as e:
            report_error("Save notes", e)
        else:
            toast_success("Saved")


def render_goal_notes() -> None:
    goals = db.list_active_goals()
    if not goals:
        st.info("Pick a goal first.")
        return

    ids = [g["id"] for g in goals]
    linked = st.query_params.get("goalId")
    default = ids.index(int(linked)) if linked and linked.isdigit() and int(linked) in ids else 0
    goal_id = st.selectbox(
        "Goal",
        options=ids,
        index=default,
        format_func=lambda gid: next(g["title"] for g in goals if g["id"] == gid),
    )

    notes = db.get_goal_notes(goal_id)
    why = st.text_area("Why it matters", value=notes["why"], key=f"why_{goal_id}")
    when_hard = st.text_area("When it gets hard", value=notes["when_hard"], key=f"hard_{goal_id}")
    if st.button("Save", type="primary", key=f"save_goal_{goal_id}"):
        try:
            db.save_goal_notes(goal_id, why, when_hard, now_iso())
        except (BeyondJanuaryError, sqlite3.Error) as e:
            report_error("Save goal notes", e)
        else:
            toast_success("Saved")


def main() -> None:
    app_header("Notes", "Write it down. Future you will thank you.")

    linked = st.query_params.get("panel")
    panel = st.radio(
        "Section",
        options=list(PANELS),
        index=list(PANELS).index(linked) if linked in PANELS else 0,
        format_func=PANELS.get,
        horizontal=True,
    )
    render_prompts(panel)

    if panel == "goal_whys":
        render_goal_notes()
    else:
        render_user_notes(panel)


if __name__ == "__main__":
    main()
