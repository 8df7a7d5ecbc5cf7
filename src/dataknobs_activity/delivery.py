"""Delivery surface of the sample activity.

Renders the stem and one input per part of the current attempt, and submits
the learner's answer by dispatching a ``submitActivity`` event. The host
grades the submission and completes the event's continuation with an
evaluation result, whose first feedback is presented to the learner.

``graded`` tells the surface whether it runs inside a graded assessment.
It is exposed as :attr:`DeliverySurface.graded` for subclasses that change
their submission or feedback policy; this surface behaves the same either way.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

from dataknobs_activity.attributes import GRADED, MODEL, STATE, read_graded, read_model, read_state
from dataknobs_activity.continuation import Continuation
from dataknobs_activity.events import SUBMIT_ACTIVITY, ActivityEvent, EventTarget
from dataknobs_activity.exceptions import ValidationError
from dataknobs_activity.lifecycle import Surface
from dataknobs_activity.models import AttemptState, Model, PartResponse, StudentResponse
from dataknobs_activity.schema import parse_evaluation_result
from dataknobs_activity.views import render_delivery

logger = logging.getLogger(__name__)

FeedbackPresenter = Callable[[str], None]


class DeliverySurface(Surface):
    """Read-only view of a model plus the learner's current attempt.

    Args:
        parent: Event target that outbound events bubble into
        presenter: Called with feedback text to show to the learner; by
            default the text is logged

    Example:
        ```python
        surface = DeliverySurface(parent=host, presenter=shown.append)
        surface.set_attribute("model", encode_attribute(model))
        surface.set_attribute("state", encode_attribute(state))
        surface.set_attribute("graded", "false")
        surface.mount()

        surface.render_target.set_value(state.parts[0].attempt_guid, "4")
        continuation = surface.render_target.click("submit")
        ```
    """

    element_name = "oli-sample-delivery"
    observed_attributes = (MODEL, STATE)

    def __init__(
        self,
        parent: EventTarget | None = None,
        presenter: FeedbackPresenter | None = None,
    ) -> None:
        super().__init__(parent=parent)
        self._presenter = presenter
        self.graded = False
        self.last_feedback: str | None = None
        self._pending: Continuation | None = None

    def props(self) -> Dict[str, Any]:
        return {
            "model": read_model(self.get_attribute(MODEL)),
            "state": read_state(self.get_attribute(STATE)),
            "graded": read_graded(self.get_attribute(GRADED)),
        }

    def render(self, model: Model, state: AttemptState, graded: bool) -> None:  # type: ignore[override]
        """Render the prompt and one input per part attempt."""
        self.graded = graded
        input_ids: List[str] = [part.attempt_guid for part in state.parts]
        render_delivery(self.render_target, stem=model.stem, input_ids=input_ids)

        attempt_guid = state.attempt_guid
        part_attempt_guid = state.parts[0].attempt_guid
        self.render_target.bind("submit", lambda: self.submit(attempt_guid, part_attempt_guid))

    def submit(self, attempt_guid: str, part_attempt_guid: str) -> Continuation:
        """Send the learner's current answer for one part to the host.

        The input is not validated; an empty answer is submitted as-is.

        Args:
            attempt_guid: The activity attempt
            part_attempt_guid: The part attempt the answer belongs to

        Returns:
            The continuation the host will complete with the evaluation
        """
        if self._pending is not None and not self._pending.done():
            logger.warning(
                "Submitting attempt %s while submission %s is still pending",
                attempt_guid,
                self._pending.correlation_id[:8],
            )

        payload = [
            PartResponse(
                attempt_guid=part_attempt_guid,
                response=StudentResponse(input=self.render_target.value(part_attempt_guid)),
            )
        ]

        event = ActivityEvent(name=SUBMIT_ACTIVITY)
        continuation = Continuation(
            callback=self.on_evaluation,
            correlation_id=event.event_id,
            name=SUBMIT_ACTIVITY,
        )
        event.detail = {
            "payload": payload,
            "attemptGuid": attempt_guid,
            "continuation": continuation,
        }

        self._pending = continuation
        logger.debug("Submitting attempt %s as event %s", attempt_guid, event.event_id[:8])
        self.dispatch_event(event)
        return continuation

    def on_evaluation(self, result: Any, error: Any) -> None:
        """Present the host's evaluation, or log its error.

        Never raises: a failed or malformed evaluation is logged and nothing
        is presented.
        """
        if error:
            logger.error("Submission failed: %s", error)
            return

        try:
            evaluation = parse_evaluation_result(result)
        except ValidationError as e:
            logger.error("Unusable evaluation result: %s", e)
            return

        self.present(evaluation.evaluations[0].feedback.content)

    def present(self, content: str) -> None:
        """Show feedback to the learner."""
        self.last_feedback = content
        if self._presenter is not None:
            self._presenter(content)
        else:
            logger.info("Feedback: %s", content)


__all__ = ["DeliverySurface", "FeedbackPresenter"]
