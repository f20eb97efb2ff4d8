"""
Typed records for profiles, generated plans, tracked plans and progress.

Everything that crosses a boundary (form state, SQLite rows, JSON columns)
goes through ``from_dict`` so that pages and logic modules only ever see
validated records.
"""

from dataclasses import dataclass, field
from datetime import date, datetime

from fitplanner.errors import ValidationError


WEEKDAYS = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

GENDERS = ["male", "female", "other"]

ACTIVITY_LEVELS = {
    "sedentary": ("Sedentary", "Little or no exercise"),
    "light": ("Lightly Active", "1-3 days/week"),
    "moderate": ("Moderately Active", "3-5 days/week"),
    "very": ("Very Active", "6-7 days/week"),
    "extra": ("Extra Active", "Very active + physical job"),
}

WORKOUT_DAY_OPTIONS = [2, 3, 4, 5, 6]

FITNESS_LEVELS = {
    "beginner": ("Beginner", "New to fitness"),
    "intermediate": ("Intermediate", "Regular exercise experience"),
    "advanced": ("Advanced", "Experienced fitness enthusiast"),
}

TIME_OPTIONS = [15, 30, 45, 60]

EQUIPMENT_TIERS = {
    "minimal": ("Minimal", "Bodyweight exercises only"),
    "basic": ("Basic", "Dumbbells & resistance bands"),
    "full": ("Full Gym", "Access to all equipment"),
}

AGE_RANGE = (16, 100)
WEIGHT_RANGE_KG = (30, 300)
HEIGHT_RANGE_CM = (100, 250)


def _require(raw, key):
    if raw is None or key not in raw:
        raise ValidationError(f"Missing required field: {key}")
    value = raw[key]
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"Missing required field: {key}")
    return value


def _parse_int(value, name, minimum=None, maximum=None):
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a whole number, got {value!r}")
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a whole number, got {value!r}") from None
    if minimum is not None and number < minimum:
        raise ValidationError(f"{name} must be at least {minimum}, got {number}")
    if maximum is not None and number > maximum:
        raise ValidationError(f"{name} must be at most {maximum}, got {number}")
    return number


def _parse_choice(value, name, choices):
    text = str(value).strip().lower()
    if text not in choices:
        raise ValidationError(f"Invalid {name}: {value!r}. Must be one of {sorted(choices)}")
    return text


def _optional_text(raw, key):
    value = (raw or {}).get(key)
    return "" if value is None else str(value).strip()


def parse_date(value):
    """Return a ``date`` from a date, datetime or YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}. Expected YYYY-MM-DD") from None


def parse_timestamp(value):
    """Return a ``datetime`` from a datetime or an ISO / SQLite timestamp string."""
    if value is None or isinstance(value, datetime):
        return value
    text = str(value).strip()
    for fmt in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S"):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {value!r}") from None


def canonical_weekday(value):
    """Map any casing of a weekday name to its canonical form, or None."""
    text = str(value or "").strip().lower()
    for day in WEEKDAYS:
        if day.lower() == text:
            return day
    return None


@dataclass
class Profile:
    """One user's onboarding profile. Weight in kg, height in cm."""

    name: str
    age: int
    gender: str
    weight: int
    height: int
    activity_level: str
    workout_days_per_week: int
    health_conditions: str = ""
    dietary_restrictions: str = ""

    @classmethod
    def from_dict(cls, raw):
        return cls(
            name=str(_require(raw, "name")).strip(),
            age=_parse_int(_require(raw, "age"), "age", *AGE_RANGE),
            gender=_parse_choice(_require(raw, "gender"), "gender", GENDERS),
            weight=_parse_int(_require(raw, "weight"), "weight", *WEIGHT_RANGE_KG),
            height=_parse_int(_require(raw, "height"), "height", *HEIGHT_RANGE_CM),
            activity_level=_parse_choice(
                _require(raw, "activity_level"), "activity_level", ACTIVITY_LEVELS
            ),
            workout_days_per_week=_parse_int(
                _require(raw, "workout_days_per_week"),
                "workout_days_per_week",
                WORKOUT_DAY_OPTIONS[0],
                WORKOUT_DAY_OPTIONS[-1],
            ),
            health_conditions=_optional_text(raw, "health_conditions"),
            dietary_restrictions=_optional_text(raw, "dietary_restrictions"),
        )

    def to_dict(self):
        return {
            "name": self.name,
            "age": self.age,
            "gender": self.gender,
            "weight": self.weight,
            "height": self.height,
            "activity_level": self.activity_level,
            "workout_days_per_week": self.workout_days_per_week,
            "health_conditions": self.health_conditions,
            "dietary_restrictions": self.dietary_restrictions,
        }


@dataclass
class GenerationPreferences:
    """Inputs for a single plan generation request."""

    fitness_level: str
    goals: str
    time_available: int
    equipment: str
    custom_equipment: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw):
        time_available = _parse_int(_require(raw, "time_available"), "time_available")
        if time_available not in TIME_OPTIONS:
            raise ValidationError(
                f"Invalid time_available: {time_available}. Must be one of {TIME_OPTIONS}"
            )

        custom = []
        for item in (raw or {}).get("custom_equipment") or []:
            text = str(item).strip()
            if text and text not in custom:
                custom.append(text)

        return cls(
            fitness_level=_parse_choice(
                _require(raw, "fitness_level"), "fitness_level", FITNESS_LEVELS
            ),
            goals=_optional_text(raw, "goals"),
            time_available=time_available,
            equipment=_parse_choice(_require(raw, "equipment"), "equipment", EQUIPMENT_TIERS),
            custom_equipment=custom,
        )

    def to_dict(self):
        return {
            "fitness_level": self.fitness_level,
            "goals": self.goals,
            "time_available": self.time_available,
            "equipment": self.equipment,
            "custom_equipment": list(self.custom_equipment),
        }


@dataclass
class GeneratedPlan:
    """Raw plan text plus the preferences used to request it."""

    plan: str
    preferences: GenerationPreferences
    id: int = None
    created_at: datetime = None

    @classmethod
    def from_dict(cls, raw):
        plan_text = raw.get("plan") if raw else None
        if not isinstance(plan_text, str):
            raise ValidationError("Missing required field: plan")
        return cls(
            plan=plan_text,
            preferences=GenerationPreferences.from_dict(_require(raw, "preferences")),
            id=raw.get("id"),
            created_at=parse_timestamp(raw.get("created_at")),
        )


@dataclass
class Exercise:
    """A prescribed exercise inside a day workout."""

    name: str
    sets: int
    reps: int
    weight: int = 0
    notes: str = ""

    @classmethod
    def from_dict(cls, raw):
        return cls(
            name=str(_require(raw, "name")).strip(),
            sets=_parse_int(_require(raw, "sets"), "sets", 0),
            reps=_parse_int(_require(raw, "reps"), "reps", 0),
            weight=_parse_int(raw.get("weight") or 0, "weight", 0),
            notes=_optional_text(raw, "notes"),
        )

    def to_dict(self):
        return {
            "name": self.name,
            "sets": self.sets,
            "reps": self.reps,
            "weight": self.weight,
            "notes": self.notes,
        }


@dataclass
class DayWorkout:
    """Named sub-workout scheduled on one weekday."""

    name: str
    exercises: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw):
        return cls(
            name=str((raw or {}).get("name") or "").strip(),
            exercises=[Exercise.from_dict(item) for item in (raw or {}).get("exercises") or []],
        )

    def to_dict(self):
        return {
            "name": self.name,
            "exercises": [exercise.to_dict() for exercise in self.exercises],
        }


@dataclass
class PerformedSet:
    reps: int
    weight: int

    def __post_init__(self):
        if self.reps < 0:
            raise ValidationError("reps must be non-negative")
        if self.weight < 0:
            raise ValidationError("weight must be non-negative")

    @property
    def volume(self):
        return self.reps * self.weight


@dataclass
class ExerciseLog:
    """Actually-performed sets for one exercise on one day."""

    name: str
    sets: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw):
        return cls(
            name=str(_require(raw, "name")).strip(),
            sets=[
                PerformedSet(
                    reps=_parse_int(s.get("reps", 0), "reps", 0),
                    weight=_parse_int(s.get("weight", 0), "weight", 0),
                )
                for s in raw.get("sets") or []
            ],
        )

    def to_dict(self):
        return {
            "name": self.name,
            "sets": [{"reps": s.reps, "weight": s.weight} for s in self.sets],
        }


@dataclass
class ProgressEntry:
    """One day's logged performance against a tracked plan."""

    date: date
    completed: bool = True
    exercises: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw):
        return cls(
            date=parse_date(_require(raw, "date")),
            completed=bool(raw.get("completed", True)),
            exercises=[ExerciseLog.from_dict(item) for item in raw.get("exercises") or []],
        )

    def to_dict(self):
        return {
            "date": self.date.isoformat(),
            "completed": self.completed,
            "exercises": [log.to_dict() for log in self.exercises],
        }

    def find_exercise(self, name):
        """Return the first log for ``name`` in this entry, or None."""
        for log in self.exercises:
            if log.name == name:
                return log
        return None


@dataclass
class TrackedPlan:
    """A user-scheduled, progress-logged copy of a generated plan."""

    name: str
    schedule: list
    workouts_by_day: dict
    description: str = ""
    progress: list = field(default_factory=list)
    source_plan_id: int = None
    id: int = None
    created_at: datetime = None

    @classmethod
    def from_dict(cls, raw):
        schedule = []
        for day in raw.get("schedule") or []:
            canonical = canonical_weekday(day)
            if canonical is None:
                raise ValidationError(f"Invalid weekday in schedule: {day!r}")
            if canonical not in schedule:
                schedule.append(canonical)

        workouts_by_day = {}
        for day, workout in (raw.get("workouts_by_day") or {}).items():
            canonical = canonical_weekday(day)
            if canonical is None:
                raise ValidationError(f"Invalid weekday in workouts: {day!r}")
            workouts_by_day[canonical] = DayWorkout.from_dict(workout)

        return cls(
            name=str(_require(raw, "name")).strip(),
            schedule=schedule,
            workouts_by_day=workouts_by_day,
            description=_optional_text(raw, "description"),
            progress=[ProgressEntry.from_dict(item) for item in raw.get("progress") or []],
            source_plan_id=raw.get("source_plan_id"),
            id=raw.get("id"),
            created_at=parse_timestamp(raw.get("created_at")),
        )


@dataclass
class User:
    id: int
    email: str
    provider: str = "password"
