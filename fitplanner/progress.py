"""
Exercise history and statistics for tracked plans.
"""

from collections import defaultdict
from dataclasses import dataclass, field

from fitplanner.models import ExerciseLog, PerformedSet, ProgressEntry, parse_date
from fitplanner.schedule import start_of_week


@dataclass
class HistoryDay:
    date: object
    sets: list = field(default_factory=list)


@dataclass
class ExerciseStats:
    max_weight: int
    max_reps: int
    total_volume: int
    workout_count: int


def exercise_history(plan, exercise_name):
    """
    Collect the sets logged under ``exercise_name`` across a plan's progress.

    Entries sharing a date are kept as separate sessions.

    Returns:
        List of HistoryDay, newest date first
    """
    history = []
    for entry in plan.progress:
        log = entry.find_exercise(exercise_name)
        if log is None:
            continue
        history.append(HistoryDay(date=entry.date, sets=list(log.sets)))

    history.sort(key=lambda day: day.date, reverse=True)
    return history


def exercise_stats(history):
    """
    Summarise an exercise history.

    Returns None for an empty history so that "no data" is never confused
    with zero performance. When the history has sessions but no sets,
    max_weight and max_reps are None.
    """
    if not history:
        return None

    all_sets = [s for day in history for s in day.sets]
    return ExerciseStats(
        max_weight=max((s.weight for s in all_sets), default=None),
        max_reps=max((s.reps for s in all_sets), default=None),
        total_volume=sum(s.reps * s.weight for s in all_sets),
        workout_count=len(history),
    )


def set_input_key(exercise_index, set_index, field_name):
    """Session-state key for one reps/weight input of the logging form."""
    return f"ex{exercise_index}_set{set_index}_{field_name}"


def _input_value(set_inputs, key, fallback):
    value = set_inputs.get(key)
    if value is None or value == "":
        return fallback
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return fallback


def build_progress_entry(entry_date, day_workout, set_inputs):
    """
    Build a completed ProgressEntry from captured form values.

    Args:
        entry_date: Calendar day being logged
        day_workout: The DayWorkout prescribed for that day
        set_inputs: Mapping of ``set_input_key(...)`` to entered values.
            Missing or blank values fall back to the prescription.

    Returns:
        ProgressEntry with one ExerciseLog per prescribed exercise
    """
    logs = []
    for exercise_index, exercise in enumerate(day_workout.exercises):
        sets = []
        for set_index in range(exercise.sets):
            reps = _input_value(
                set_inputs, set_input_key(exercise_index, set_index, "reps"), exercise.reps
            )
            weight = _input_value(
                set_inputs, set_input_key(exercise_index, set_index, "weight"), exercise.weight or 0
            )
            sets.append(PerformedSet(reps=reps, weight=weight))
        logs.append(ExerciseLog(name=exercise.name, sets=sets))

    return ProgressEntry(date=parse_date(entry_date), completed=True, exercises=logs)


def weekly_volume(plans):
    """
    Total volume per training week across all tracked plans.

    Returns:
        Dict of week-start date -> volume, sorted oldest first
    """
    totals = defaultdict(int)
    for plan in plans:
        for entry in plan.progress:
            week = start_of_week(entry.date)
            for log in entry.exercises:
                totals[week] += sum(s.volume for s in log.sets)
    return dict(sorted(totals.items()))


def logged_dates(plan):
    """Dates with a completed entry, used to mark calendar days done."""
    return {entry.date for entry in plan.progress if entry.completed}
