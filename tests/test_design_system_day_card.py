import unittest

from fitplanner.design_system import COLORS, get_day_card_html, get_step_indicator_html


class DayCardHtmlTests(unittest.TestCase):
    def test_day_card_marks_today_state(self):
        html_output = get_day_card_html(
            day_label="WED",
            date_label="01/03",
            title="Push Day",
            subtitle="Strength",
            is_today=True,
            is_completed=False,
            color_scheme=COLORS,
        )
        self.assertIn('class="day-card today"', html_output)
        self.assertIn('border: 2px solid', html_output)
        self.assertIn("○", html_output)

    def test_day_card_marks_selected_and_completed(self):
        html_output = get_day_card_html(
            day_label="MON",
            date_label="01/01",
            title="Legs",
            subtitle="",
            is_selected=True,
            is_completed=True,
            color_scheme=COLORS,
        )
        self.assertIn('class="day-card selected"', html_output)
        self.assertIn(COLORS["accent_soft"], html_output)
        self.assertIn("✓", html_output)

    def test_day_card_escapes_text_content(self):
        html_output = get_day_card_html(
            day_label="<TUE>",
            date_label="01/02",
            title="ARMS<script>",
            subtitle="Curls & Dips",
            color_scheme=COLORS,
        )
        self.assertIn("&lt;TUE&gt;", html_output)
        self.assertIn("ARMS&lt;script&gt;", html_output)
        self.assertIn("Curls &amp; Dips", html_output)


class StepIndicatorHtmlTests(unittest.TestCase):
    def test_step_indicator_shows_position(self):
        html_output = get_step_indicator_html(2, 3, "Body & activity", color_scheme=COLORS)
        self.assertIn("Step 2 of 3: Body &amp; activity", html_output)
        self.assertEqual(html_output.count(COLORS["accent"]), 2)


if __name__ == "__main__":
    unittest.main()
