"""
Progress page - training volume across all tracked plans
"""

import pandas as pd
import streamlit as st

from fitplanner.errors import PersistenceError
from fitplanner.ui_utils import empty_state, metric_card, render_page_header
from fitplanner.progress import weekly_volume


def build_volume_frame(plans):
    """Weekly volume as a DataFrame indexed by week start, ready for st.bar_chart."""
    volume = weekly_volume(plans)
    frame = pd.DataFrame(
        {"Week": [week.strftime("%b %d") for week in volume], "Volume": list(volume.values())}
    )
    return frame.set_index("Week")


def show(ctx):
    """Render the progress page"""
    render_page_header("Progress", "Volume and sessions across your tracked plans")

    try:
        plans = ctx.store.list_tracked_plans(ctx.user.id)
    except PersistenceError as e:
        st.error(f"❌ Could not load your progress: {e}")
        return

    sessions = sum(len(plan.progress) for plan in plans)
    if not sessions:
        empty_state("No workouts logged yet", "Complete a workout in the tracker to see progress.")
        return

    frame = build_volume_frame(plans)

    col1, col2, col3 = st.columns(3)
    with col1:
        metric_card("Sessions", sessions)
    with col2:
        metric_card("Total Volume", f"{int(frame['Volume'].sum()):,}", "reps × weight")
    with col3:
        metric_card("Tracked Plans", len(plans))

    st.markdown("### Weekly Volume")
    st.bar_chart(frame)

    st.markdown("### Sessions per Plan")
    st.dataframe(
        pd.DataFrame(
            [{"Plan": plan.name, "Sessions": len(plan.progress)} for plan in plans]
        ),
        hide_index=True,
        width="stretch",
    )
