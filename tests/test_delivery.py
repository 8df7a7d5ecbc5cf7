"""Tests for the delivery surface."""

import logging

import pytest

from dataknobs_activity.attributes import encode_attribute
from dataknobs_activity.delivery import DeliverySurface
from dataknobs_activity.events import SUBMIT_ACTIVITY
from dataknobs_activity.models import (
    AttemptState,
    Evaluation,
    EvaluationResult,
    Feedback,
    PartState,
)

CORRECT_RESULT = {
    "evaluations": [
        {
            "attemptGuid": "part-attempt-1",
            "score": 1,
            "outOf": 1,
            "feedback": {"id": "feedback1", "content": "Correct"},
        }
    ]
}


@pytest.fixture
def shown():
    return []


@pytest.fixture
def surface(recording_host, model_attr, state_attr, shown):
    surface = DeliverySurface(parent=recording_host, presenter=shown.append)
    surface.set_attribute("model", model_attr)
    surface.set_attribute("state", state_attr)
    surface.set_attribute("graded", "false")
    surface.mount()
    return surface


class TestRender:

    def test_observed_attributes(self):
        assert DeliverySurface.observed_attributes == ("model", "state")

    def test_one_input_per_part_attempt(self, surface):
        assert surface.render_target.fields == {"part-attempt-1": ""}
        assert 'id="part-attempt-1"' in surface.render_target.html
        assert "What is two plus two?" in surface.render_target.html
        assert "submit" in surface.render_target.controls

    def test_graded_is_exposed(self, recording_host, model_attr, state_attr):
        surface = DeliverySurface(parent=recording_host)
        surface.set_attribute("model", model_attr)
        surface.set_attribute("state", state_attr)
        surface.set_attribute("graded", "true")
        surface.mount()

        assert surface.graded is True

    def test_graded_does_not_change_markup(self, surface, recording_host, model_attr, state_attr):
        graded = DeliverySurface(parent=recording_host)
        graded.set_attribute("model", model_attr)
        graded.set_attribute("state", state_attr)
        graded.set_attribute("graded", "true")
        graded.mount()

        assert graded.render_target.html == surface.render_target.html

    def test_state_change_rerenders(self, surface):
        """Test a new attempt replaces the inputs of the previous one."""
        state = AttemptState(attempt_guid="attempt-2", parts=[PartState(attempt_guid="part-attempt-2")])
        surface.set_attribute("state", encode_attribute(state))

        assert surface.render_target.fields == {"part-attempt-2": ""}

    def test_graded_change_alone_does_not_rerender(self, surface):
        count = surface.render_target.render_count
        surface.set_attribute("graded", "true")

        assert surface.render_target.render_count == count


class TestSubmit:

    def test_submit_dispatches_payload(self, surface, recording_host):
        """Test one submitActivity event carries the learner's input."""
        surface.render_target.set_value("part-attempt-1", "7")

        continuation = surface.render_target.click("submit")

        assert len(recording_host.events) == 1
        event = recording_host.events[0]
        assert event.name == SUBMIT_ACTIVITY
        assert event.detail["attemptGuid"] == "attempt-1"
        assert event.detail["continuation"] is continuation
        assert [entry.to_dict() for entry in event.detail["payload"]] == [
            {"attemptGuid": "part-attempt-1", "response": {"input": "7"}}
        ]

    def test_empty_input_is_submitted(self, surface, recording_host):
        surface.submit("attempt-1", "part-attempt-1")

        payload = recording_host.events[0].detail["payload"]
        assert payload[0].response.input == ""

    def test_resubmit_while_pending_warns(self, surface, recording_host, caplog):
        surface.submit("attempt-1", "part-attempt-1")
        surface.submit("attempt-1", "part-attempt-1")

        assert len(recording_host.events) == 2
        assert "still pending" in caplog.text

    def test_resubmit_after_completion_does_not_warn(self, surface, caplog):
        surface.submit("attempt-1", "part-attempt-1")(CORRECT_RESULT, None)
        surface.submit("attempt-1", "part-attempt-1")

        assert "still pending" not in caplog.text


class TestEvaluation:

    def test_success_presents_first_feedback(self, surface, shown):
        surface.render_target.set_value("part-attempt-1", "4")
        continuation = surface.render_target.click("submit")

        continuation(CORRECT_RESULT, None)

        assert shown == ["Correct"]
        assert surface.last_feedback == "Correct"

    def test_accepts_evaluation_result_objects(self, surface, shown):
        result = EvaluationResult(
            evaluations=[
                Evaluation(
                    attempt_guid="part-attempt-1",
                    score=0,
                    out_of=1,
                    feedback=Feedback(id="feedback2", content="Incorrect"),
                )
            ]
        )

        surface.submit("attempt-1", "part-attempt-1")(result, None)

        assert shown == ["Incorrect"]

    def test_error_is_logged_not_presented(self, surface, shown, caplog):
        continuation = surface.submit("attempt-1", "part-attempt-1")

        continuation(None, RuntimeError("grader offline"))

        assert shown == []
        assert surface.last_feedback is None
        assert "Submission failed: grader offline" in caplog.text

    def test_malformed_result_is_logged(self, surface, shown, caplog):
        continuation = surface.submit("attempt-1", "part-attempt-1")

        continuation({"evaluations": []}, None)

        assert shown == []
        assert "Unusable evaluation result" in caplog.text

    def test_minimal_result_is_presented(self, surface, shown):
        """Test a host answering with feedback content alone is understood."""
        continuation = surface.submit("attempt-1", "part-attempt-1")

        continuation({"evaluations": [{"score": 1, "feedback": {"content": "Correct"}}]}, None)

        assert shown == ["Correct"]

    def test_feedback_without_content_is_logged(self, surface, shown, caplog):
        continuation = surface.submit("attempt-1", "part-attempt-1")

        continuation({"evaluations": [{"feedback": {"id": "feedback1"}}]}, None)

        assert shown == []
        assert "evaluations.0.feedback.content" in caplog.text

    def test_empty_error_counts_as_success(self, surface, shown):
        surface.submit("attempt-1", "part-attempt-1")(CORRECT_RESULT, "")

        assert shown == ["Correct"]

    def test_default_presenter_logs(self, recording_host, model_attr, state_attr, caplog):
        caplog.set_level(logging.INFO, logger="dataknobs_activity")
        surface = DeliverySurface(parent=recording_host)
        surface.set_attribute("model", model_attr)
        surface.set_attribute("state", state_attr)
        surface.set_attribute("graded", "false")
        surface.mount()

        surface.submit("attempt-1", "part-attempt-1")(CORRECT_RESULT, None)

        assert surface.last_feedback == "Correct"
        assert "Feedback: Correct" in caplog.text
