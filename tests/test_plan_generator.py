import threading
import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock

import anthropic
import httpx

from fitplanner.config import DEFAULTS
from fitplanner.errors import (
    ConfigurationError,
    GenerationFailedError,
    GenerationTimeoutError,
    GenerationTransportError,
)
from fitplanner.models import GenerationPreferences, Profile
from fitplanner.plan_generator import (
    REQUIRED_SECTIONS,
    BatchGenerationClient,
    JobStatus,
    PlanGenerator,
    PlanJobPoller,
    PollState,
    build_plan_prompt,
)


def _config(max_attempts=5):
    config = {section: dict(values) for section, values in DEFAULTS.items()}
    config["generation"]["max_poll_attempts"] = max_attempts
    return config


PROFILE = Profile.from_dict({
    "name": "Alex",
    "age": 30,
    "gender": "male",
    "weight": 80,
    "height": 180,
    "activity_level": "moderate",
    "workout_days_per_week": 3,
})

PREFERENCES = GenerationPreferences.from_dict({
    "fitness_level": "intermediate",
    "goals": "",
    "time_available": 45,
    "equipment": "basic",
    "custom_equipment": ["Pull-up bar"],
})


class FakeJobClient:
    def __init__(self, statuses, text="Monday: Legs\n- Squat: 3 sets, 5 reps"):
        self.statuses = list(statuses)
        self.text = text
        self.polls = 0
        self.cancelled = []
        self.prompts = []

    def submit_prompt(self, prompt):
        self.prompts.append(prompt)
        return "job-1"

    def poll_status(self, job_id):
        self.polls += 1
        if self.statuses:
            return self.statuses.pop(0)
        return JobStatus.PENDING

    def fetch_result_text(self, job_id):
        return self.text

    def cancel(self, job_id):
        self.cancelled.append(job_id)


class BuildPlanPromptTests(unittest.TestCase):
    def test_prompt_embeds_profile_and_preferences(self):
        prompt = build_plan_prompt(PROFILE, PREFERENCES)

        self.assertIn("Age: 30", prompt)
        self.assertIn("Weight: 80 kg", prompt)
        self.assertIn("Activity Level: Moderately Active", prompt)
        self.assertIn("Time Available: 45 minutes", prompt)
        self.assertIn("Equipment: basic (Additional: Pull-up bar)", prompt)
        for section in REQUIRED_SECTIONS:
            self.assertIn(f"### {section}", prompt)

    def test_empty_optional_fields_render_as_none(self):
        prompt = build_plan_prompt(PROFILE, PREFERENCES)
        self.assertIn("Health Conditions: None", prompt)
        self.assertIn("Dietary Restrictions: None", prompt)
        self.assertIn("Goals: None", prompt)


class PlanJobPollerTests(unittest.TestCase):
    def setUp(self):
        self.sleeps = []

    def _poller(self, client, max_attempts=5):
        return PlanJobPoller(client, poll_interval=1, max_attempts=max_attempts, sleep=self.sleeps.append)

    def test_completes_after_pending_polls(self):
        client = FakeJobClient([JobStatus.PENDING, JobStatus.PENDING, JobStatus.COMPLETED])
        outcome = self._poller(client).run("job-1")

        self.assertEqual(outcome.state, PollState.COMPLETED)
        self.assertEqual(outcome.attempts, 3)
        self.assertIn("Squat", outcome.text)
        self.assertEqual(self.sleeps, [1, 1])

    def test_failed_job_stops_polling(self):
        client = FakeJobClient([JobStatus.FAILED, JobStatus.COMPLETED])
        outcome = self._poller(client).run("job-1")

        self.assertEqual(outcome.state, PollState.FAILED)
        self.assertEqual(client.polls, 1)

    def test_times_out_after_max_attempts(self):
        client = FakeJobClient([])
        outcome = self._poller(client, max_attempts=4).run("job-1")

        self.assertEqual(outcome.state, PollState.TIMED_OUT)
        self.assertEqual(client.polls, 4)
        self.assertEqual(len(self.sleeps), 3)

    def test_cancel_event_stops_polling(self):
        client = FakeJobClient([])
        cancel = threading.Event()

        def on_attempt(attempt, status):
            if attempt == 2:
                cancel.set()

        outcome = self._poller(client).run("job-1", cancel_event=cancel, on_attempt=on_attempt)

        self.assertEqual(outcome.state, PollState.CANCELLED)
        self.assertEqual(client.polls, 2)

    def test_rejects_non_positive_attempt_limit(self):
        with self.assertRaises(ValueError):
            PlanJobPoller(FakeJobClient([]), max_attempts=0)


class PlanGeneratorTests(unittest.TestCase):
    def test_missing_api_key_is_a_configuration_error(self):
        with self.assertRaises(ConfigurationError):
            PlanGenerator(_config(), api_key=None)

    def test_generate_returns_plan_text(self):
        client = FakeJobClient([JobStatus.COMPLETED])
        generator = PlanGenerator(_config(), client=client, sleep=lambda _: None)

        text = generator.generate(PROFILE, PREFERENCES)

        self.assertTrue(text.startswith("Monday"))
        self.assertEqual(len(client.prompts), 1)

    def test_generate_raises_on_failed_job(self):
        generator = PlanGenerator(_config(), client=FakeJobClient([JobStatus.FAILED]), sleep=lambda _: None)
        with self.assertRaises(GenerationFailedError):
            generator.generate(PROFILE, PREFERENCES)

    def test_generate_timeout_cancels_job(self):
        client = FakeJobClient([])
        generator = PlanGenerator(_config(max_attempts=2), client=client, sleep=lambda _: None)

        with self.assertRaises(GenerationTimeoutError):
            generator.generate(PROFILE, PREFERENCES)
        self.assertEqual(client.cancelled, ["job-1"])

    def test_generate_returns_none_when_cancelled(self):
        client = FakeJobClient([])
        cancel = threading.Event()
        cancel.set()
        generator = PlanGenerator(_config(), client=client, sleep=lambda _: None)

        self.assertIsNone(generator.generate(PROFILE, PREFERENCES, cancel_event=cancel))
        self.assertEqual(client.polls, 0)
        self.assertEqual(client.cancelled, ["job-1"])

    def test_interrupted_polling_cancels_job_and_propagates(self):
        class RerunRequested(BaseException):
            pass

        def on_attempt(attempt, status):
            raise RerunRequested()

        client = FakeJobClient([JobStatus.PENDING])
        generator = PlanGenerator(_config(), client=client, sleep=lambda _: None)

        with self.assertRaises(RerunRequested):
            generator.generate(PROFILE, PREFERENCES, on_attempt=on_attempt)
        self.assertEqual(client.polls, 1)
        self.assertEqual(client.cancelled, ["job-1"])

    def test_transport_error_while_polling_cancels_job(self):
        client = FakeJobClient([])
        client.poll_status = MagicMock(side_effect=GenerationTransportError("connection reset"))
        generator = PlanGenerator(_config(), client=client, sleep=lambda _: None)

        with self.assertRaises(GenerationTransportError):
            generator.generate(PROFILE, PREFERENCES)
        self.assertEqual(client.cancelled, ["job-1"])


class BatchGenerationClientTests(unittest.TestCase):
    def setUp(self):
        self.sdk = MagicMock()
        self.client = BatchGenerationClient("key", _config(), client=self.sdk)

    def test_poll_status_maps_batch_states(self):
        self.sdk.messages.batches.retrieve.return_value = SimpleNamespace(
            processing_status="in_progress", request_counts=SimpleNamespace(succeeded=0)
        )
        self.assertEqual(self.client.poll_status("b1"), JobStatus.PENDING)

        self.sdk.messages.batches.retrieve.return_value = SimpleNamespace(
            processing_status="ended", request_counts=SimpleNamespace(succeeded=1)
        )
        self.assertEqual(self.client.poll_status("b1"), JobStatus.COMPLETED)

        self.sdk.messages.batches.retrieve.return_value = SimpleNamespace(
            processing_status="ended", request_counts=SimpleNamespace(succeeded=0)
        )
        self.assertEqual(self.client.poll_status("b1"), JobStatus.FAILED)

    def test_fetch_result_text_reads_first_content_block(self):
        message = SimpleNamespace(content=[SimpleNamespace(text="plan text")])
        self.sdk.messages.batches.results.return_value = [
            SimpleNamespace(
                custom_id="workout-plan",
                result=SimpleNamespace(type="succeeded", message=message),
            )
        ]
        self.assertEqual(self.client.fetch_result_text("b1"), "plan text")

    def test_fetch_result_text_raises_for_errored_request(self):
        self.sdk.messages.batches.results.return_value = [
            SimpleNamespace(custom_id="workout-plan", result=SimpleNamespace(type="errored"))
        ]
        with self.assertRaises(GenerationFailedError):
            self.client.fetch_result_text("b1")

    def test_submit_prompt_sends_single_request(self):
        self.sdk.messages.batches.create.return_value = SimpleNamespace(id="batch-9")

        self.assertEqual(self.client.submit_prompt("hello"), "batch-9")
        requests = self.sdk.messages.batches.create.call_args.kwargs["requests"]
        self.assertEqual(len(requests), 1)
        self.assertEqual(requests[0]["params"]["messages"][0]["content"], "hello")

    @staticmethod
    def _request():
        return httpx.Request("POST", "https://api.anthropic.com/v1/messages/batches")

    def test_connection_error_becomes_transport_error(self):
        self.sdk.messages.batches.retrieve.side_effect = anthropic.APIConnectionError(
            request=self._request()
        )
        with self.assertRaises(GenerationTransportError):
            self.client.poll_status("b1")

    def test_rejected_api_key_becomes_configuration_error(self):
        response = httpx.Response(401, request=self._request())
        self.sdk.messages.batches.create.side_effect = anthropic.AuthenticationError(
            "invalid x-api-key", response=response, body=None
        )
        with self.assertRaises(ConfigurationError):
            self.client.submit_prompt("hello")

    def test_server_error_becomes_transport_error(self):
        response = httpx.Response(500, request=self._request())
        self.sdk.messages.batches.results.side_effect = anthropic.InternalServerError(
            "overloaded", response=response, body=None
        )
        with self.assertRaisesRegex(GenerationTransportError, "500"):
            self.client.fetch_result_text("b1")


if __name__ == "__main__":
    unittest.main()
