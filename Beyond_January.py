"""
Beyond January - Home

Run with:
    streamlit run Beyond_January.py
"""

from __future__ import annotations

import random
import time
from datetime import datetime

import streamlit as st

from beyond_january.feed import format_number, initial_feed, tick_feed
from beyond_january.metrics import status_label
from beyond_january.ui_helpers import app_header, bootstrap


st.set_page_config(
    page_title="Beyond January",
    page_icon="🗓️",
    layout="wide",
)

settings = bootstrap()
counter = settings.counter()


def _feed_state() -> None:
    if "feed_rng" not in st.session_state:
        st.session_state["feed_rng"] = random.Random()
        st.session_state["feed"] = initial_feed(st.session_state["feed_rng"])
    st.session_state.setdefault("opened_at", time.time())


@st.fragment(run_every=settings.counter_refresh_seconds)
def render_counter() -> None:
    # Same number for every viewer at the same moment; resets at midnight.
    count = counter.count_at(datetime.now())
    minutes_on_page = max(1, int((time.time() - st.session_state["opened_at"]) // 60))

    with st.container(border=True):
        left, right = st.columns([0.7, 0.3])
        with left:
            st.caption("Check-ins today")
            st.markdown(f"# {format_number(count)}")
        with right:
            st.caption(f"Live while you're here · {minutes_on_page}m")
        st.write("**No streaks.** No pressure. Just consistency over time.")


@st.fragment(run_every=settings.feed_refresh_seconds)
def render_feed() -> None:
    st.session_state["feed"] = tick_feed(
        st.session_state["feed"],
        st.session_state["feed_rng"],
        now_ms=int(time.time() * 1000),
    )
    with st.container(border=True):
        st.subheader("People are showing up")
        st.caption("A quiet reminder that effort is happening everywhere, alongside you.")
        for item in st.session_state["feed"]:
            st.write(f"{status_label(item.status)} · {item.goal}")
            st.caption(f"{item.seconds_ago}s ago")


def render_principles() -> None:
    with st.container(border=True):
        st.subheader("Built for real life")
        for title, body in (
            ("Any check-in counts", "Complete, partial, or just showing up."),
            ("Backfill is normal", "Missed a day? Log it later. No guilt."),
            ("Private by default", "Community is a feeling, not exposure."),
        ):
            st.write(f"**{title}**")
            st.caption(body)
        st.write("Your only job today: **show up.**")


def main() -> None:
    _feed_state()
    app_header("Beyond January", "You're not alone. Showing up counts, even when it's not perfect.")

    c1, c2, _ = st.columns([0.2, 0.2, 0.6])
    with c1:
        st.page_link("pages/1_Today.py", label="Check in today", icon="✅")
    with c2:
        st.page_link("pages/2_Progress.py", label="View progress", icon="📈")

    render_counter()

    left, right = st.columns(2, gap="large")
    with left:
        render_feed()
    with right:
        render_principles()


if __name__ == "__main__":
    main()
