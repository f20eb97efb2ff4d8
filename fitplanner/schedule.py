"""
Weekly calendar projection of tracked plans.
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from fitplanner.models import WEEKDAYS, parse_date


logger = logging.getLogger(__name__)


@dataclass
class ScheduledWorkout:
    plan: object
    day_workout: object

    @property
    def title(self):
        return self.day_workout.name or self.plan.name

    @property
    def exercises(self):
        return self.day_workout.exercises


@dataclass
class DaySchedule:
    date: object
    weekday: str
    workouts: list = field(default_factory=list)


def start_of_week(reference_date):
    """Return the Monday on or before ``reference_date``."""
    day = parse_date(reference_date)
    return day - timedelta(days=day.weekday())


def week_dates(reference_date):
    start = start_of_week(reference_date)
    return [start + timedelta(days=offset) for offset in range(7)]


def weekday_name(day):
    return WEEKDAYS[day.weekday()]


def scheduled_workout(day, plan):
    """
    Return the plan's workout for ``day``, or None when it is not scheduled.

    A weekday that is active in the plan but has no parsed workout is
    treated as unscheduled and logged, since it points at a plan whose text
    had an empty day section.
    """
    name = weekday_name(day)
    if name not in plan.schedule:
        return None

    day_workout = plan.workouts_by_day.get(name)
    if day_workout is None:
        logger.warning("No workout found for %s in plan %r", name, plan.name)
        return None
    return ScheduledWorkout(plan=plan, day_workout=day_workout)


def workouts_for_date(day, plans):
    day = parse_date(day)
    workouts = []
    for plan in plans:
        workout = scheduled_workout(day, plan)
        if workout is not None:
            workouts.append(workout)
    return workouts


def project_week(reference_date, plans):
    """
    Map each day of the Monday-first week containing ``reference_date``
    to the tracked plans active on it.

    Args:
        reference_date: Any date inside the week
        plans: TrackedPlan records

    Returns:
        List of 7 DaySchedule entries, Monday first
    """
    return [
        DaySchedule(date=day, weekday=weekday_name(day), workouts=workouts_for_date(day, plans))
        for day in week_dates(reference_date)
    ]
