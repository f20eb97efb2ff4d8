"""
Generate Plan page - request a new AI workout plan
"""

import streamlit as st

from fitplanner.errors import (
    ConfigurationError,
    GenerationFailedError,
    GenerationTimeoutError,
    GenerationTransportError,
    PersistenceError,
    ValidationError,
)
from fitplanner.models import (
    EQUIPMENT_TIERS,
    FITNESS_LEVELS,
    TIME_OPTIONS,
    GeneratedPlan,
    GenerationPreferences,
)
from fitplanner.plan_generator import PlanGenerator
from fitplanner.plan_parser import split_plan_sections
from fitplanner.ui_utils import nav_button, render_page_header


def should_start_plan_generation(generate_clicked, generation_in_progress, inputs_valid=True):
    return bool(generate_clicked and inputs_valid and not generation_in_progress)


def _parse_custom_equipment(text):
    return [item.strip() for item in (text or "").split(",") if item.strip()]


def _request_plan_generation():
    # Runs before the rerun, so the flag still holds the previous run's value.
    if should_start_plan_generation(True, st.session_state.get("plan_generation_in_progress", False)):
        st.session_state.plan_generation_in_progress = True
        st.session_state.plan_generation_requested = True


def render_plan_sections(plan_text):
    sections = split_plan_sections(plan_text)
    if not sections:
        st.markdown(plan_text)
        return
    for section in sections:
        st.markdown(f"#### {section.title}")
        st.markdown(section.body)


def _run_generation(ctx, profile, preferences):
    status = st.empty()

    def on_attempt(attempt, job_status):
        status.caption(f"Waiting for your plan... (check {attempt}, {job_status.value})")

    try:
        with st.spinner("🤖 Generating your personalized workout plan..."):
            generator = PlanGenerator.from_config(ctx.config, ctx.secrets)
            plan_text = generator.generate(profile, preferences, on_attempt=on_attempt)
    except ConfigurationError as e:
        st.error(f"❌ {e}")
        return
    except GenerationTimeoutError as e:
        st.error(f"⏱️ {e}")
        return
    except GenerationTransportError as e:
        st.error(f"❌ Network problem while generating your plan: {e}")
        return
    except GenerationFailedError as e:
        st.error(f"❌ {e}")
        return
    finally:
        status.empty()
        st.session_state.plan_generation_in_progress = False

    generated = GeneratedPlan(plan=plan_text, preferences=preferences)
    try:
        generated.id = ctx.store.append_generated_plan(ctx.user.id, generated)
    except PersistenceError as e:
        st.error(f"❌ Your plan was generated but could not be saved: {e}")
        render_plan_sections(plan_text)
        return

    st.session_state.latest_generated_plan_id = generated.id
    st.success("✅ Workout plan generated successfully!")
    render_plan_sections(plan_text)

    col1, col2 = st.columns(2)
    with col1:
        nav_button("📋 View Plans", "plans", type="primary", width="stretch")
    with col2:
        nav_button("📅 Open Tracker", "tracker", width="stretch")


def show(ctx):
    """Render the generate plan page"""
    render_page_header("Generate New Workout Plan", "Create a plan around your profile and goals")

    if 'plan_generation_in_progress' not in st.session_state:
        st.session_state.plan_generation_in_progress = False

    try:
        profile = ctx.store.load_profile(ctx.user.id)
    except PersistenceError as e:
        st.error(f"❌ Could not load your profile: {e}")
        return
    if profile is None:
        st.warning("Complete your profile before generating a plan.")
        nav_button("Set up profile", "profile_setup", type="primary")
        return

    levels = list(FITNESS_LEVELS)
    fitness_level = st.radio(
        "Fitness level",
        options=levels,
        format_func=lambda v: f"{FITNESS_LEVELS[v][0]} ({FITNESS_LEVELS[v][1]})",
        key="gen_fitness_level",
    )
    goals = st.text_area(
        "Goals",
        placeholder="e.g. build strength, lose 5 kg, run a 10k",
        key="gen_goals",
    )
    time_available = st.select_slider(
        "Time per workout (minutes)",
        options=TIME_OPTIONS,
        value=45,
        key="gen_time_available",
    )
    tiers = list(EQUIPMENT_TIERS)
    equipment = st.radio(
        "Equipment",
        options=tiers,
        format_func=lambda v: f"{EQUIPMENT_TIERS[v][0]} ({EQUIPMENT_TIERS[v][1]})",
        horizontal=True,
        key="gen_equipment",
    )
    custom_equipment = st.text_input(
        "Additional equipment (comma separated)",
        key="gen_custom_equipment",
    )

    preferences = None
    try:
        preferences = GenerationPreferences.from_dict({
            "fitness_level": fitness_level,
            "goals": goals,
            "time_available": time_available,
            "equipment": equipment,
            "custom_equipment": _parse_custom_equipment(custom_equipment),
        })
    except ValidationError as e:
        st.warning(f"⚠️ {e}")

    st.markdown("---")

    generate_clicked = st.button(
        "🚀 Generate Workout Plan with AI",
        type="primary",
        width="stretch",
        disabled=preferences is None or st.session_state.plan_generation_in_progress,
        on_click=_request_plan_generation,
    )

    if st.session_state.pop("plan_generation_requested", False):
        if generate_clicked and preferences is not None:
            _run_generation(ctx, profile, preferences)
        else:
            st.session_state.plan_generation_in_progress = False
