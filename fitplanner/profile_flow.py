"""
Three-step profile form used for onboarding and profile editing.
"""

from fitplanner.errors import ProfileFlowError
from fitplanner.models import Profile


STEP_FIELDS = {
    1: ("name", "age", "gender"),
    2: ("weight", "height", "activity_level", "workout_days_per_week"),
    3: ("health_conditions", "dietary_restrictions"),
}

STEP_TITLES = {
    1: "About you",
    2: "Body & activity",
    3: "Health notes",
}

ALL_FIELDS = tuple(f for step in sorted(STEP_FIELDS) for f in STEP_FIELDS[step])


class ProfileFormFlow:
    """
    Linear step machine holding the profile form's values.

    Widgets write into the flow through ``set_value`` as they change;
    ``submit`` only reads that captured state. Required-field presence is
    left to the form itself, so ``next_step`` does not validate.
    """

    TOTAL_STEPS = 3

    def __init__(self, initial=None):
        self.step = 1
        self.values = {name: "" for name in ALL_FIELDS}
        for name, value in (initial or {}).items():
            if name in self.values and value is not None:
                self.values[name] = value

    @classmethod
    def for_edit(cls, profile):
        return cls(initial=profile.to_dict())

    @property
    def fields(self):
        return STEP_FIELDS[self.step]

    @property
    def can_go_back(self):
        return self.step > 1

    @property
    def can_submit(self):
        return self.step == self.TOTAL_STEPS

    def set_value(self, name, value):
        if name not in self.values:
            raise ProfileFlowError(f"Unknown profile field: {name}")
        self.values[name] = value

    def next_step(self):
        if self.step < self.TOTAL_STEPS:
            self.step += 1
        return self.step

    def back(self):
        if self.step > 1:
            self.step -= 1
        return self.step

    def submit(self):
        """
        Return the validated profile.

        Raises:
            ProfileFlowError: If called before the last step
            ValidationError: If a captured value is missing or invalid
        """
        if not self.can_submit:
            raise ProfileFlowError(
                f"Profile can only be submitted from step {self.TOTAL_STEPS} (currently {self.step})"
            )
        return Profile.from_dict(self.values)
