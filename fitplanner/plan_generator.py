"""
AI-powered workout plan generation using the Claude Message Batches API.

A plan request is submitted as a one-item batch and then polled until the
batch ends. Polling runs as an explicit state machine with a fixed interval,
a maximum attempt count and a cancel event for requesters that go away.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum

import anthropic

from fitplanner.config import get_api_key
from fitplanner.errors import (
    ConfigurationError,
    GenerationFailedError,
    GenerationTimeoutError,
    GenerationTransportError,
)
from fitplanner.models import ACTIVITY_LEVELS


logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = [
    "Information Summary",
    "Weekly Workout Schedule",
    "Exercise Descriptions",
    "Safety Advice",
    "Progress Tracking Suggestions",
]

REQUEST_ID = "workout-plan"


class JobStatus(Enum):
    """Status reported by the generation service for one job."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class PollState(Enum):
    """Where the polling loop ended up."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


@dataclass
class PollOutcome:
    state: PollState
    attempts: int
    text: str = None


def format_equipment(preferences):
    if preferences.custom_equipment:
        return f"{preferences.equipment} (Additional: {', '.join(preferences.custom_equipment)})"
    return preferences.equipment


def build_plan_prompt(profile, preferences):
    """
    Build the natural-language generation prompt.

    Args:
        profile: Profile of the requesting user
        preferences: GenerationPreferences for this request

    Returns:
        Prompt text
    """
    activity_label = ACTIVITY_LEVELS.get(profile.activity_level, (profile.activity_level,))[0]
    sections = "\n".join(f"### {title}" for title in REQUIRED_SECTIONS)

    return f"""Create a workout plan with these parameters:
Name: {profile.name}
Age: {profile.age}
Gender: {profile.gender}
Weight: {profile.weight} kg
Height: {profile.height} cm
Activity Level: {activity_label}
Workout Days Per Week: {profile.workout_days_per_week}
Health Conditions: {profile.health_conditions or 'None'}
Dietary Restrictions: {profile.dietary_restrictions or 'None'}

Workout Preferences:
Fitness Level: {preferences.fitness_level}
Goals: {preferences.goals or 'None'}
Time Available: {preferences.time_available} minutes
Equipment: {format_equipment(preferences)}

Please provide a detailed workout plan that takes into account any health conditions and dietary restrictions. Structure the response with these sections:
{sections}

In the Weekly Workout Schedule section, start each training day on its own line with the weekday name followed by a colon (for example "Monday: Upper Body"), then list one exercise per line as "- Exercise Name: 3 sets, 10 reps".
"""


class BatchGenerationClient:
    """Thin wrapper over the Message Batches endpoints."""

    def __init__(self, api_key, config, client=None):
        """
        Args:
            api_key: Anthropic API key
            config: Full configuration dictionary
            client: Optional pre-built anthropic client (tests)
        """
        claude = config["claude"]
        self.client = client or anthropic.Anthropic(api_key=api_key, timeout=claude.get("timeout", 120))
        self.model = claude["model"]
        self.max_tokens = claude["max_tokens"]

    def _call(self, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as e:
            raise ConfigurationError(
                "The API key was rejected. Please check your .env file or Streamlit secrets."
            ) from e
        except anthropic.APIConnectionError as e:
            raise GenerationTransportError(f"Could not reach the generation service: {e}") from e
        except anthropic.APIStatusError as e:
            raise GenerationTransportError(
                f"Generation service error ({e.status_code}): {e.message}"
            ) from e

    def submit_prompt(self, prompt):
        batch = self._call(
            self.client.messages.batches.create,
            requests=[
                {
                    "custom_id": REQUEST_ID,
                    "params": {
                        "model": self.model,
                        "max_tokens": self.max_tokens,
                        "messages": [{"role": "user", "content": prompt}],
                    },
                }
            ],
        )
        logger.info("Submitted generation job %s", batch.id)
        return batch.id

    def poll_status(self, job_id):
        batch = self._call(self.client.messages.batches.retrieve, job_id)
        if batch.processing_status != "ended":
            return JobStatus.PENDING
        if batch.request_counts.succeeded > 0:
            return JobStatus.COMPLETED
        return JobStatus.FAILED

    def fetch_result_text(self, job_id):
        results = self._call(self.client.messages.batches.results, job_id)
        for item in results:
            if item.custom_id != REQUEST_ID:
                continue
            if item.result.type != "succeeded":
                raise GenerationFailedError(f"Generation job ended with status {item.result.type}")
            return item.result.message.content[0].text
        raise GenerationFailedError("Generation job returned no message")

    def cancel(self, job_id):
        self._call(self.client.messages.batches.cancel, job_id)


class PlanJobPoller:
    """Polls one job until it completes, fails, runs out of attempts or is cancelled."""

    def __init__(self, client, poll_interval=1.0, max_attempts=600, sleep=time.sleep):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.client = client
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self.sleep = sleep

    def run(self, job_id, cancel_event=None, on_attempt=None):
        """
        Drive the job to a terminal state.

        Each status request is only issued after the previous one returned.

        Args:
            job_id: Handle returned by submit_prompt
            cancel_event: threading.Event set when the requester is gone
            on_attempt: Optional callback(attempt, JobStatus) for progress display

        Returns:
            PollOutcome
        """

        def cancelled():
            return cancel_event is not None and cancel_event.is_set()

        attempts = 0
        while attempts < self.max_attempts:
            if cancelled():
                return PollOutcome(PollState.CANCELLED, attempts)

            attempts += 1
            status = self.client.poll_status(job_id)
            if on_attempt:
                on_attempt(attempts, status)

            if status is JobStatus.COMPLETED:
                if cancelled():
                    return PollOutcome(PollState.CANCELLED, attempts)
                return PollOutcome(PollState.COMPLETED, attempts, self.client.fetch_result_text(job_id))
            if status is JobStatus.FAILED:
                return PollOutcome(PollState.FAILED, attempts)

            if attempts < self.max_attempts:
                self.sleep(self.poll_interval)

        return PollOutcome(PollState.TIMED_OUT, attempts)


class PlanGenerator:
    """Generates workout plans from a profile and preferences."""

    def __init__(self, config, api_key=None, client=None, sleep=time.sleep):
        """
        Initialize the plan generator.

        Args:
            config: Full configuration dictionary
            api_key: Anthropic API key; required unless ``client`` is given
            client: Object with submit_prompt/poll_status/fetch_result_text/cancel
            sleep: Sleep function used between polls

        Raises:
            ConfigurationError: If no API key is available
        """
        if client is None:
            if not api_key:
                raise ConfigurationError(
                    f"{config['claude']['api_key_env']} is missing. "
                    "Add it to your .env file or Streamlit secrets."
                )
            client = BatchGenerationClient(api_key, config)

        generation = config["generation"]
        self.client = client
        self.poller = PlanJobPoller(
            client,
            poll_interval=generation["poll_interval_seconds"],
            max_attempts=generation["max_poll_attempts"],
            sleep=sleep,
        )

    @classmethod
    def from_config(cls, config, secrets=None):
        return cls(config, api_key=get_api_key(config, secrets))

    def _cancel_quietly(self, job_id):
        try:
            self.client.cancel(job_id)
        except (GenerationTransportError, ConfigurationError) as e:
            logger.warning("Could not cancel generation job %s: %s", job_id, e)

    def generate(self, profile, preferences, cancel_event=None, on_attempt=None):
        """
        Generate a plan and wait for it.

        Returns:
            Plan text, or None when the request was cancelled

        Raises:
            GenerationFailedError: The job reported failure
            GenerationTimeoutError: The job did not finish in time
            GenerationTransportError: The service could not be reached
            ConfigurationError: The API key was rejected
        """
        prompt = build_plan_prompt(profile, preferences)
        job_id = self.client.submit_prompt(prompt)

        try:
            outcome = self.poller.run(job_id, cancel_event=cancel_event, on_attempt=on_attempt)
        except BaseException:
            # Requester went away mid-poll (e.g. a Streamlit rerun) or the service failed.
            logger.info("Polling for generation job %s interrupted", job_id)
            self._cancel_quietly(job_id)
            raise

        if outcome.state is PollState.COMPLETED:
            logger.info("Generation job %s completed after %d polls", job_id, outcome.attempts)
            return outcome.text
        if outcome.state is PollState.FAILED:
            raise GenerationFailedError("Failed to generate workout plan. Please try again.")
        if outcome.state is PollState.CANCELLED:
            logger.info("Generation job %s abandoned by requester", job_id)
            self._cancel_quietly(job_id)
            return None

        self._cancel_quietly(job_id)
        raise GenerationTimeoutError(
            f"Plan generation timed out after {outcome.attempts} status checks. Please try again."
        )

