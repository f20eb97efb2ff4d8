import unittest
from datetime import date

from fitplanner.models import (
    DayWorkout,
    Exercise,
    ExerciseLog,
    PerformedSet,
    ProgressEntry,
    TrackedPlan,
)
from fitplanner.progress import (
    build_progress_entry,
    exercise_history,
    exercise_stats,
    logged_dates,
    set_input_key,
    weekly_volume,
)


def _entry(day, name, sets):
    return ProgressEntry(
        date=day,
        exercises=[ExerciseLog(name=name, sets=[PerformedSet(r, w) for r, w in sets])],
    )


def _plan(progress):
    return TrackedPlan(name="Strength", schedule=["Monday"], workouts_by_day={}, progress=progress)


class ExerciseStatsTests(unittest.TestCase):
    def test_squat_history_stats(self):
        plan = _plan([
            _entry(date(2024, 1, 1), "Squat", [(10, 100)]),
            _entry(date(2024, 1, 8), "Squat", [(8, 110)]),
        ])

        history = exercise_history(plan, "Squat")
        stats = exercise_stats(history)

        self.assertEqual([day.date for day in history], [date(2024, 1, 8), date(2024, 1, 1)])
        self.assertEqual(stats.max_weight, 110)
        self.assertEqual(stats.max_reps, 10)
        self.assertEqual(stats.total_volume, 1880)
        self.assertEqual(stats.workout_count, 2)

    def test_empty_history_has_no_stats(self):
        plan = _plan([_entry(date(2024, 1, 1), "Bench Press", [(5, 80)])])
        history = exercise_history(plan, "Squat")

        self.assertEqual(history, [])
        self.assertIsNone(exercise_stats(history))

    def test_session_without_sets_counts_but_has_no_maxima(self):
        plan = _plan([_entry(date(2024, 1, 1), "Squat", [])])
        stats = exercise_stats(exercise_history(plan, "Squat"))

        self.assertEqual(stats.workout_count, 1)
        self.assertEqual(stats.total_volume, 0)
        self.assertIsNone(stats.max_weight)
        self.assertIsNone(stats.max_reps)

    def test_same_day_entries_are_separate_sessions(self):
        plan = _plan([
            _entry(date(2024, 1, 1), "Squat", [(5, 100)]),
            _entry(date(2024, 1, 1), "Squat", [(5, 105)]),
        ])
        self.assertEqual(exercise_stats(exercise_history(plan, "Squat")).workout_count, 2)


class BuildProgressEntryTests(unittest.TestCase):
    def setUp(self):
        self.workout = DayWorkout(
            name="Push",
            exercises=[Exercise("Bench Press", 2, 8, weight=60), Exercise("Dips", 1, 12)],
        )

    def test_entered_values_override_prescription(self):
        inputs = {
            set_input_key(0, 0, "reps"): 10,
            set_input_key(0, 0, "weight"): 62,
            set_input_key(0, 1, "reps"): "",
            set_input_key(1, 0, "weight"): 5,
        }

        entry = build_progress_entry("2024-01-01", self.workout, inputs)

        self.assertEqual(entry.date, date(2024, 1, 1))
        self.assertTrue(entry.completed)
        bench = entry.find_exercise("Bench Press")
        self.assertEqual([(s.reps, s.weight) for s in bench.sets], [(10, 62), (8, 60)])
        dips = entry.find_exercise("Dips")
        self.assertEqual([(s.reps, s.weight) for s in dips.sets], [(12, 5)])

    def test_input_key_format(self):
        self.assertEqual(set_input_key(2, 1, "weight"), "ex2_set1_weight")


class WeeklyVolumeTests(unittest.TestCase):
    def test_volume_is_grouped_by_week_start(self):
        first = _plan([
            _entry(date(2024, 1, 1), "Squat", [(10, 100)]),
            _entry(date(2024, 1, 3), "Squat", [(5, 100)]),
        ])
        second = _plan([_entry(date(2024, 1, 9), "Bench Press", [(8, 50)])])

        volume = weekly_volume([first, second])

        self.assertEqual(volume, {date(2024, 1, 1): 1500, date(2024, 1, 8): 400})
        self.assertEqual(logged_dates(first), {date(2024, 1, 1), date(2024, 1, 3)})


if __name__ == "__main__":
    unittest.main()
