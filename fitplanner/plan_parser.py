"""
Parsing of generated plan text.

Two formats exist. The day-keyed format ("Monday: ..." headers followed by
"- Exercise: 3 sets, 10 reps" bullets) feeds the tracker. The sectioned
format ("### Weekly Workout Schedule" style headings) is only split for
display.
"""

import re
from dataclasses import dataclass, field

from fitplanner.models import WEEKDAYS, DayWorkout, Exercise, TrackedPlan, canonical_weekday


DAY_HEADER_RE = re.compile(
    r"^(Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday)[:\s-]\s*(.*)",
    re.IGNORECASE,
)
REPS_RE = re.compile(r"(\d+)[-\s]?reps", re.IGNORECASE)
SETS_RE = re.compile(r"(\d+)[-\s]?sets", re.IGNORECASE)

DEFAULT_SETS = 3
DEFAULT_REPS = 12


@dataclass
class PlanSection:
    title: str
    content: list = field(default_factory=list)

    @property
    def body(self):
        return "\n".join(self.content)


def _day_workout(exercises):
    return DayWorkout(name=exercises[0].name.split(":")[0], exercises=exercises)


def _parse_exercise_line(line):
    text = line.replace("- ", "", 1).strip()
    name, _, description = text.partition(":")
    name = name.strip()
    description = description.strip()

    reps_match = REPS_RE.search(description)
    sets_match = SETS_RE.search(description)

    return Exercise(
        name=name,
        sets=int(sets_match.group(1)) if sets_match else DEFAULT_SETS,
        reps=int(reps_match.group(1)) if reps_match else DEFAULT_REPS,
        weight=0,
        notes=description,
    )


def parse_workout_schedule(plan_text):
    """
    Parse day-keyed plan text into a weekday -> DayWorkout mapping.

    Weekday headers with no exercise lines before the next header (or the
    end of the text) are dropped. Lines that are neither headers nor
    exercise bullets are ignored, so malformed output degrades to a partial
    schedule instead of an error.

    Args:
        plan_text: Generated plan text

    Returns:
        Dict keyed by canonical weekday name
    """
    schedule = {}
    current_day = None
    exercises = []

    for line in (plan_text or "").split("\n"):
        day_match = DAY_HEADER_RE.match(line)
        if day_match:
            if current_day and exercises:
                schedule[current_day] = _day_workout(exercises)
            current_day = canonical_weekday(day_match.group(1))
            exercises = []
            continue

        if current_day and line.strip().startswith("- "):
            exercises.append(_parse_exercise_line(line))

    if current_day and exercises:
        schedule[current_day] = _day_workout(exercises)

    return schedule


def split_plan_sections(plan_text):
    """Split heading-organised plan text into titled display sections."""
    sections = []
    current_title = ""
    current_content = []

    lines = [line for line in (plan_text or "").split("\n") if line.strip()]
    for line in lines:
        if line.startswith("#"):
            if current_title and current_content:
                sections.append(PlanSection(current_title, current_content))
            current_title = line.lstrip("#").strip()
            current_content = []
        else:
            current_content.append(line)

    if current_title and current_content:
        sections.append(PlanSection(current_title, current_content))

    return sections


def build_tracked_plan(name, generated_plan, schedule=None):
    """
    Create a TrackedPlan from a generated plan.

    When no schedule is given, every weekday the parser found becomes active.
    """
    workouts_by_day = parse_workout_schedule(generated_plan.plan)
    if schedule is None:
        active_days = list(workouts_by_day)
    else:
        active_days = [canonical_weekday(day) for day in schedule]
        active_days = [day for day in active_days if day]

    ordered = [day for day in WEEKDAYS if day in active_days]
    return TrackedPlan(
        name=name.strip(),
        description=generated_plan.preferences.goals,
        schedule=ordered,
        workouts_by_day=workouts_by_day,
        progress=[],
        source_plan_id=generated_plan.id,
    )
