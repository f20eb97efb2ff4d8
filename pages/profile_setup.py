"""
Profile Setup page - three-step onboarding form
"""

import streamlit as st

from fitplanner.errors import PersistenceError, ProfileFlowError, ValidationError
from fitplanner.models import (
    ACTIVITY_LEVELS,
    AGE_RANGE,
    GENDERS,
    HEIGHT_RANGE_CM,
    WEIGHT_RANGE_KG,
    WORKOUT_DAY_OPTIONS,
)
from fitplanner.profile_flow import STEP_TITLES, ProfileFormFlow
from fitplanner.ui_utils import render_page_header, step_indicator


def _number_default(value, fallback):
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def _option_index(options, value, fallback=0):
    return options.index(value) if value in options else fallback


def _render_step_fields(flow, key_prefix):
    """Render the current step's widgets and capture their values into the flow."""
    values = flow.values

    if flow.step == 1:
        flow.set_value("name", st.text_input("Name", value=values["name"], key=f"{key_prefix}_name"))
        flow.set_value(
            "age",
            st.number_input(
                "Age",
                min_value=AGE_RANGE[0],
                max_value=AGE_RANGE[1],
                value=_number_default(values["age"], 25),
                step=1,
                key=f"{key_prefix}_age",
            ),
        )
        flow.set_value(
            "gender",
            st.radio(
                "Gender",
                options=GENDERS,
                index=_option_index(GENDERS, values["gender"]),
                format_func=str.title,
                horizontal=True,
                key=f"{key_prefix}_gender",
            ),
        )

    elif flow.step == 2:
        col1, col2 = st.columns(2)
        with col1:
            flow.set_value(
                "weight",
                st.number_input(
                    "Weight (kg)",
                    min_value=WEIGHT_RANGE_KG[0],
                    max_value=WEIGHT_RANGE_KG[1],
                    value=_number_default(values["weight"], 70),
                    step=1,
                    key=f"{key_prefix}_weight",
                ),
            )
        with col2:
            flow.set_value(
                "height",
                st.number_input(
                    "Height (cm)",
                    min_value=HEIGHT_RANGE_CM[0],
                    max_value=HEIGHT_RANGE_CM[1],
                    value=_number_default(values["height"], 170),
                    step=1,
                    key=f"{key_prefix}_height",
                ),
            )

        levels = list(ACTIVITY_LEVELS)
        flow.set_value(
            "activity_level",
            st.selectbox(
                "Activity level",
                options=levels,
                index=_option_index(levels, values["activity_level"], 2),
                format_func=lambda v: f"{ACTIVITY_LEVELS[v][0]} ({ACTIVITY_LEVELS[v][1]})",
                key=f"{key_prefix}_activity_level",
            ),
        )
        flow.set_value(
            "workout_days_per_week",
            st.select_slider(
                "Workout days per week",
                options=WORKOUT_DAY_OPTIONS,
                value=_number_default(values["workout_days_per_week"], 3),
                key=f"{key_prefix}_workout_days_per_week",
            ),
        )

    else:
        flow.set_value(
            "health_conditions",
            st.text_area(
                "Health conditions or injuries (optional)",
                value=values["health_conditions"],
                key=f"{key_prefix}_health_conditions",
            ),
        )
        flow.set_value(
            "dietary_restrictions",
            st.text_area(
                "Dietary restrictions (optional)",
                value=values["dietary_restrictions"],
                key=f"{key_prefix}_dietary_restrictions",
            ),
        )


def render_profile_flow(ctx, flow_key, submit_label, next_page):
    """
    Drive a ProfileFormFlow stored in session state.

    Saves the profile on submit and navigates to ``next_page``.
    """
    flow = st.session_state[flow_key]
    step_indicator(flow.step, flow.TOTAL_STEPS, STEP_TITLES[flow.step])
    _render_step_fields(flow, flow_key)

    col1, col2 = st.columns(2)
    with col1:
        if flow.can_go_back and st.button("← Back", key=f"{flow_key}_back", width="stretch"):
            flow.back()
            st.rerun()
    with col2:
        if not flow.can_submit:
            if st.button("Next →", key=f"{flow_key}_next", type="primary", width="stretch"):
                flow.next_step()
                st.rerun()
            return

        if not st.button(submit_label, key=f"{flow_key}_submit", type="primary", width="stretch"):
            return

    try:
        profile = flow.submit()
        ctx.store.save_profile(ctx.user.id, profile)
    except (ValidationError, ProfileFlowError) as e:
        st.error(f"❌ {e}")
        return
    except PersistenceError as e:
        st.error(f"❌ Could not save your profile: {e}")
        return

    del st.session_state[flow_key]
    st.session_state.current_page = next_page
    st.rerun()


def show(ctx):
    """Render the onboarding page"""
    render_page_header("Set up your profile", "A few details so plans fit you")

    if "profile_setup_flow" not in st.session_state:
        st.session_state.profile_setup_flow = ProfileFormFlow()

    render_profile_flow(ctx, "profile_setup_flow", "Complete Setup", "generate")
