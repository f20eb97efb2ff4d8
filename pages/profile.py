"""
Profile page - edit an existing profile with the same three-step form
"""

import streamlit as st

from fitplanner.errors import PersistenceError
from fitplanner.models import ACTIVITY_LEVELS
from fitplanner.profile_flow import ProfileFormFlow
from fitplanner.ui_utils import render_page_header, stat_grid
from pages.profile_setup import render_profile_flow


def show(ctx):
    """Render the profile page"""
    render_page_header("Your Profile", ctx.user.email)

    try:
        profile = ctx.store.load_profile(ctx.user.id)
    except PersistenceError as e:
        st.error(f"❌ Could not load your profile: {e}")
        return

    if profile is None:
        st.session_state.current_page = "profile_setup"
        st.rerun()

    stat_grid([
        {"label": "Age", "value": profile.age},
        {"label": "Weight", "value": f"{profile.weight} kg"},
        {"label": "Height", "value": f"{profile.height} cm"},
        {"label": "Activity", "value": ACTIVITY_LEVELS[profile.activity_level][0]},
        {"label": "Days / week", "value": profile.workout_days_per_week},
    ])

    if "profile_edit_flow" not in st.session_state:
        if st.button("✏️ Edit Profile", type="primary"):
            st.session_state.profile_edit_flow = ProfileFormFlow.for_edit(profile)
            st.rerun()
        return

    if st.button("Cancel editing"):
        del st.session_state["profile_edit_flow"]
        st.rerun()

    render_profile_flow(ctx, "profile_edit_flow", "Save Profile", "profile")
