import unittest

from streamlit.testing.v1 import AppTest

from pages.generate_plan import should_start_plan_generation


class GeneratePlanButtonFlowTest(unittest.TestCase):
    def test_starts_when_clicked_and_not_in_progress(self):
        self.assertTrue(should_start_plan_generation(True, False))

    def test_does_not_start_when_already_in_progress(self):
        self.assertFalse(should_start_plan_generation(True, True))

    def test_does_not_start_without_click(self):
        self.assertFalse(should_start_plan_generation(False, False))

    def test_does_not_start_with_invalid_preferences(self):
        self.assertFalse(should_start_plan_generation(True, False, inputs_valid=False))


def _generate_page_script():
    from types import SimpleNamespace

    from fitplanner.models import Profile
    from pages.generate_plan import show

    class ProfileOnlyStore:
        def load_profile(self, user_id):
            return Profile.from_dict({
                "name": "Alex",
                "age": 30,
                "gender": "male",
                "weight": 80,
                "height": 180,
                "activity_level": "moderate",
                "workout_days_per_week": 3,
            })

    show(SimpleNamespace(
        config={"claude": {"api_key_env": "FITPLANNER_TEST_UNSET_API_KEY"}},
        secrets={},
        store=ProfileOnlyStore(),
        user=SimpleNamespace(id=1),
    ))


class GeneratePlanPageTest(unittest.TestCase):
    def _app(self):
        return AppTest.from_function(_generate_page_script, default_timeout=30)

    def test_button_enabled_when_idle(self):
        at = self._app().run()

        self.assertFalse(at.exception)
        self.assertFalse(at.button[0].disabled)
        self.assertFalse(at.session_state["plan_generation_in_progress"])

    def test_button_disabled_while_generation_in_progress(self):
        at = self._app()
        at.session_state["plan_generation_in_progress"] = True
        at.run()

        self.assertTrue(at.button[0].disabled)
        self.assertTrue(at.session_state["plan_generation_in_progress"])

    def test_click_disables_button_for_the_run_and_clears_flag_after_error(self):
        at = self._app().run()
        at.button[0].click().run()

        # Rendered while the request was running, then the missing key ended it.
        self.assertTrue(at.button[0].disabled)
        self.assertEqual(len(at.error), 1)
        self.assertIn("FITPLANNER_TEST_UNSET_API_KEY", at.error[0].value)
        self.assertFalse(at.session_state["plan_generation_in_progress"])

        at.run()
        self.assertFalse(at.button[0].disabled)
        self.assertEqual(len(at.error), 0)


if __name__ == "__main__":
    unittest.main()
