import os
import tempfile
import unittest
from datetime import date

from fitplanner.errors import PersistenceError
from fitplanner.models import (
    DayWorkout,
    Exercise,
    ExerciseLog,
    GeneratedPlan,
    GenerationPreferences,
    PerformedSet,
    Profile,
    ProgressEntry,
    TrackedPlan,
)
from fitplanner.workout_store import WorkoutStore


PREFERENCES = GenerationPreferences.from_dict({
    "fitness_level": "beginner",
    "goals": "Lose weight",
    "time_available": 30,
    "equipment": "minimal",
})


def _tracked(name="Strength"):
    return TrackedPlan(
        name=name,
        schedule=["Monday", "Thursday"],
        workouts_by_day={
            "Monday": DayWorkout("Squat", [Exercise("Squat", 3, 5, notes="3 sets, 5 reps")]),
        },
        description="Get strong",
    )


class WorkoutStoreTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.store = WorkoutStore(os.path.join(self.tmpdir.name, "nested", "test.db"))
        self.store.init_schema()
        self.user_id = self.store.create_user("alex@example.com", "hash")
        self.other_id = self.store.create_user("sam@example.com", "hash")

    def tearDown(self):
        self.store.close()
        self.tmpdir.cleanup()

    def test_find_user_by_email(self):
        user, password_hash = self.store.find_user_by_email("alex@example.com")
        self.assertEqual(user.id, self.user_id)
        self.assertEqual(password_hash, "hash")
        self.assertIsNone(self.store.find_user_by_email("nobody@example.com"))

    def test_duplicate_email_raises_persistence_error(self):
        with self.assertRaises(PersistenceError):
            self.store.create_user("alex@example.com", "other")

    def test_profile_save_overwrites(self):
        self.assertIsNone(self.store.load_profile(self.user_id))
        raw = {
            "name": "Alex",
            "age": 30,
            "gender": "male",
            "weight": 80,
            "height": 180,
            "activity_level": "light",
            "workout_days_per_week": 3,
        }
        self.store.save_profile(self.user_id, Profile.from_dict(raw))
        self.store.save_profile(self.user_id, Profile.from_dict({**raw, "weight": 78}))

        self.assertEqual(self.store.load_profile(self.user_id).weight, 78)
        self.assertIsNone(self.store.load_profile(self.other_id))

    def test_recent_plans_are_newest_first_and_limited(self):
        for index in range(3):
            self.store.append_generated_plan(
                self.user_id, GeneratedPlan(plan=f"plan {index}", preferences=PREFERENCES)
            )
        self.store.append_generated_plan(
            self.other_id, GeneratedPlan(plan="not mine", preferences=PREFERENCES)
        )

        plans = self.store.list_recent_plans(self.user_id, limit=2)

        self.assertEqual([p.plan for p in plans], ["plan 2", "plan 1"])
        self.assertEqual(plans[0].preferences.goals, "Lose weight")
        self.assertIsNotNone(plans[0].created_at)

    def test_tracked_plan_round_trip_with_progress(self):
        plan_id = self.store.create_tracked_plan(self.user_id, _tracked())
        entry = ProgressEntry(
            date=date(2024, 1, 1),
            exercises=[ExerciseLog("Squat", [PerformedSet(5, 100), PerformedSet(5, 105)])],
        )
        self.store.append_progress(self.user_id, plan_id, entry)

        [plan] = self.store.list_tracked_plans(self.user_id)

        self.assertEqual(plan.id, plan_id)
        self.assertEqual(plan.schedule, ["Monday", "Thursday"])
        self.assertEqual(plan.workouts_by_day["Monday"].exercises[0].reps, 5)
        self.assertEqual(plan.progress[0].date, date(2024, 1, 1))
        self.assertEqual(plan.progress[0].exercises[0].sets[1].weight, 105)
        self.assertEqual(self.store.list_tracked_plans(self.other_id), [])

    def test_progress_cannot_be_added_to_another_users_plan(self):
        plan_id = self.store.create_tracked_plan(self.user_id, _tracked())
        with self.assertRaises(PersistenceError):
            self.store.append_progress(self.other_id, plan_id, ProgressEntry(date=date(2024, 1, 1)))

    def test_delete_removes_plan_and_progress(self):
        plan_id = self.store.create_tracked_plan(self.user_id, _tracked())
        self.store.append_progress(self.user_id, plan_id, ProgressEntry(date=date(2024, 1, 1)))

        self.assertFalse(self.store.delete_tracked_plan(self.other_id, plan_id))
        self.assertTrue(self.store.delete_tracked_plan(self.user_id, plan_id))
        self.assertEqual(self.store.list_tracked_plans(self.user_id), [])
        self.assertEqual(self.store.count_summary(self.user_id)["sessions"], 0)


if __name__ == "__main__":
    unittest.main()
