"""
View Plans page - recent generated plans, and turning one into a tracked plan
"""

import streamlit as st

from fitplanner.errors import PersistenceError, ValidationError
from fitplanner.models import EQUIPMENT_TIERS, FITNESS_LEVELS, WEEKDAYS
from fitplanner.plan_parser import build_tracked_plan, parse_workout_schedule
from fitplanner.ui_utils import empty_state, nav_button, render_page_header
from pages.generate_plan import render_plan_sections


def _plan_caption(plan):
    prefs = plan.preferences
    created = plan.created_at.strftime("%b %d, %Y %H:%M") if plan.created_at else "Unsaved"
    return (
        f"{created} · {FITNESS_LEVELS[prefs.fitness_level][0]} · "
        f"{prefs.time_available} min · {EQUIPMENT_TIERS[prefs.equipment][0]}"
    )


def _track_plan_form(ctx, plan):
    parsed_days = list(parse_workout_schedule(plan.plan))
    if not parsed_days:
        st.caption("No day-by-day schedule was found in this plan, so it cannot be tracked.")
        return

    with st.form(f"track_plan_{plan.id}"):
        name = st.text_input("Plan name", value=plan.preferences.goals[:40] or "My Plan")
        days = st.multiselect("Workout days", options=WEEKDAYS, default=parsed_days)
        submitted = st.form_submit_button("➕ Add to Tracker", type="primary")

    if not submitted:
        return
    if not name.strip():
        st.error("Please give the plan a name.")
        return
    if not days:
        st.error("Pick at least one workout day.")
        return

    try:
        tracked = build_tracked_plan(name, plan, schedule=days)
        ctx.store.create_tracked_plan(ctx.user.id, tracked)
    except (ValidationError, PersistenceError) as e:
        st.error(f"❌ Could not add plan: {e}")
        return

    st.success(f"✅ Added “{tracked.name}” to your tracker")
    nav_button("📅 Open Tracker", "tracker", key=f"open_tracker_{plan.id}")


def show(ctx):
    """Render the view plans page"""
    render_page_header("Your Plans", "Recently generated workout plans")

    limit = int(ctx.config["plans"]["recent_limit"])
    try:
        plans = ctx.store.list_recent_plans(ctx.user.id, limit=limit)
    except PersistenceError as e:
        st.error(f"❌ Could not load your plans: {e}")
        return

    if not plans:
        empty_state("No plans yet", "Generate your first workout plan to see it here.")
        nav_button("🆕 Generate Plan", "generate", type="primary")
        return

    latest_id = st.session_state.get("latest_generated_plan_id")
    for index, plan in enumerate(plans):
        expanded = plan.id == latest_id or (latest_id is None and index == 0)
        with st.expander(_plan_caption(plan), expanded=expanded):
            render_plan_sections(plan.plan)
            st.markdown("---")
            _track_plan_form(ctx, plan)
