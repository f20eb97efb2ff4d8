"""
Tracker page - weekly calendar of tracked plans, workout logging and history
"""

from datetime import date, timedelta

import pandas as pd
import streamlit as st

from fitplanner.errors import PersistenceError, ValidationError
from fitplanner.progress import (
    build_progress_entry,
    exercise_history,
    exercise_stats,
    logged_dates,
    set_input_key,
)
from fitplanner.schedule import project_week
from fitplanner.ui_utils import (
    day_card,
    empty_state,
    nav_button,
    render_page_header,
    set_flash,
    show_flash,
    stat_grid,
)


def _widget_key(plan_id, day, key):
    return f"log_{plan_id}_{day.isoformat()}_{key}"


def _day_summary(day_schedule):
    if not day_schedule.workouts:
        return "Rest", ""
    if len(day_schedule.workouts) == 1:
        workout = day_schedule.workouts[0]
        return workout.title, workout.plan.name
    return f"{len(day_schedule.workouts)} workouts", ""


def _render_week(plans):
    if "tracker_week_offset" not in st.session_state:
        st.session_state.tracker_week_offset = 0
    if "tracker_selected_date" not in st.session_state:
        st.session_state.tracker_selected_date = date.today()

    col_prev, col_label, col_next = st.columns([1, 3, 1])
    with col_prev:
        if st.button("← Previous", width="stretch"):
            st.session_state.tracker_week_offset -= 1
            st.rerun()
    with col_next:
        if st.button("Next →", width="stretch"):
            st.session_state.tracker_week_offset += 1
            st.rerun()

    reference = date.today() + timedelta(weeks=st.session_state.tracker_week_offset)
    week = project_week(reference, plans)
    with col_label:
        st.markdown(
            f"<div style='text-align: center; font-weight: 600;'>"
            f"Week of {week[0].date.strftime('%B %d, %Y')}</div>",
            unsafe_allow_html=True,
        )

    done = set()
    for plan in plans:
        done |= logged_dates(plan)

    columns = st.columns(7)
    for column, day_schedule in zip(columns, week):
        title, subtitle = _day_summary(day_schedule)
        with column:
            day_card(
                day_schedule.weekday[:3],
                day_schedule.date.strftime("%m/%d"),
                title,
                subtitle,
                is_today=day_schedule.date == date.today(),
                is_completed=day_schedule.date in done,
                is_selected=day_schedule.date == st.session_state.tracker_selected_date,
            )
            if st.button("Select", key=f"select_{day_schedule.date.isoformat()}", width="stretch"):
                st.session_state.tracker_selected_date = day_schedule.date
                st.rerun()

    selected = st.session_state.tracker_selected_date
    for day_schedule in week:
        if day_schedule.date == selected:
            return day_schedule
    return project_week(selected, plans)[selected.weekday()]


def _render_logging_form(ctx, scheduled, day):
    plan = scheduled.plan
    already_logged = day in logged_dates(plan)

    st.markdown(f"#### {scheduled.title}")
    st.caption(plan.name + (" · already logged today" if already_logged else ""))

    set_inputs = {}
    for ex_idx, exercise in enumerate(scheduled.exercises):
        st.markdown(f"**{exercise.name}** · {exercise.sets} × {exercise.reps}")
        if exercise.notes:
            st.caption(exercise.notes)
        for set_idx in range(exercise.sets):
            col_label, col_reps, col_weight = st.columns([1, 2, 2])
            with col_label:
                st.markdown(f"Set {set_idx + 1}")
            for column, field, default in (
                (col_reps, "reps", exercise.reps),
                (col_weight, "weight", exercise.weight),
            ):
                key = set_input_key(ex_idx, set_idx, field)
                with column:
                    set_inputs[key] = st.number_input(
                        field.title() if field == "reps" else "Weight (kg)",
                        min_value=0,
                        value=int(default or 0),
                        step=1,
                        key=_widget_key(plan.id, day, key),
                        label_visibility="collapsed" if set_idx else "visible",
                    )

    if st.button("✅ Complete Workout", key=f"complete_{plan.id}_{day.isoformat()}", type="primary"):
        try:
            entry = build_progress_entry(day, scheduled.day_workout, set_inputs)
            ctx.store.append_progress(ctx.user.id, plan.id, entry)
        except (ValidationError, PersistenceError) as e:
            st.error(f"❌ Could not save workout: {e}")
            return
        set_flash("Workout logged!")
        st.rerun()


def _render_history(plan):
    names = []
    for day_workout in plan.workouts_by_day.values():
        for exercise in day_workout.exercises:
            if exercise.name not in names:
                names.append(exercise.name)
    if not names:
        return

    name = st.selectbox("Exercise", options=names, key=f"history_exercise_{plan.id}")
    history = exercise_history(plan, name)
    stats = exercise_stats(history)
    if stats is None:
        st.caption("No sessions logged for this exercise yet.")
        return

    stat_grid([
        {"label": "Max Weight", "value": "-" if stats.max_weight is None else f"{stats.max_weight} kg"},
        {"label": "Max Reps", "value": "-" if stats.max_reps is None else stats.max_reps},
        {"label": "Total Volume", "value": f"{stats.total_volume:,}"},
        {"label": "Workouts", "value": stats.workout_count},
    ])

    rows = []
    for day in history:
        for number, performed in enumerate(day.sets, start=1):
            rows.append({
                "Date": day.date.isoformat(),
                "Set": number,
                "Reps": performed.reps,
                "Weight (kg)": performed.weight,
            })
    st.dataframe(pd.DataFrame(rows), hide_index=True, width="stretch")


def _render_plan_management(ctx, plans):
    st.markdown("### Your Tracked Plans")
    for plan in plans:
        with st.expander(f"{plan.name} · {', '.join(day[:3] for day in plan.schedule)}"):
            if plan.description:
                st.caption(plan.description)
            _render_history(plan)

            confirm = st.checkbox("Confirm delete", key=f"confirm_delete_{plan.id}")
            if st.button("🗑️ Delete Plan", key=f"delete_{plan.id}", disabled=not confirm):
                try:
                    ctx.store.delete_tracked_plan(ctx.user.id, plan.id)
                except PersistenceError as e:
                    st.error(f"❌ Could not delete plan: {e}")
                    return
                st.rerun()


def show(ctx):
    """Render the tracker page"""
    render_page_header("Workout Tracker", "Your week at a glance")
    show_flash()

    try:
        plans = ctx.store.list_tracked_plans(ctx.user.id)
    except PersistenceError as e:
        st.error(f"❌ Could not load your tracked plans: {e}")
        return

    if not plans:
        empty_state("No tracked plans", "Add a generated plan to your tracker to schedule it.")
        nav_button("📋 View Plans", "plans", type="primary")
        return

    day_schedule = _render_week(plans)

    st.markdown("---")
    st.markdown(f"### {day_schedule.weekday}, {day_schedule.date.strftime('%B %d')}")
    if not day_schedule.workouts:
        st.info("Rest day. No workouts scheduled.")
    for scheduled in day_schedule.workouts:
        _render_logging_form(ctx, scheduled, day_schedule.date)

    st.markdown("---")
    _render_plan_management(ctx, plans)
