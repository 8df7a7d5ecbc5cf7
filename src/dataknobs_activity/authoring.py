"""Authoring surface of the sample activity.

Displays the current ``model`` attribute as two editable fields, the stem and
the correct answer, and reports edits to the host by dispatching a
``modelUpdated`` event. The event carries a complete replacement model built
with :func:`~dataknobs_activity.builder.build_model` and a
:class:`~dataknobs_activity.continuation.Continuation` that the host invokes
once the save has been handled.

The host re-sets ``model`` whenever its undo/redo history moves, so a render
always reflects the latest attribute and never the previous render.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from dataknobs_activity.attributes import MODEL, read_model
from dataknobs_activity.builder import build_model, correct_answer
from dataknobs_activity.continuation import Continuation
from dataknobs_activity.events import MODEL_UPDATED, ActivityEvent
from dataknobs_activity.lifecycle import Surface
from dataknobs_activity.models import Model
from dataknobs_activity.views import render_authoring

logger = logging.getLogger(__name__)


class AuthoringSurface(Surface):
    """Editable view of a model.

    Example:
        ```python
        surface = AuthoringSurface(parent=host)
        surface.set_attribute("model", encode_attribute(model))
        surface.mount()

        surface.render_target.set_value("stem", "What is 2 + 3?")
        surface.render_target.set_value("correct", "5")
        continuation = surface.render_target.click("save")
        ```
    """

    element_name = "oli-sample-authoring"
    observed_attributes = (MODEL,)

    def props(self) -> Dict[str, Any]:
        return {"model": read_model(self.get_attribute(MODEL))}

    def render(self, model: Model) -> None:  # type: ignore[override]
        """Project ``model`` into the stem and correct-answer fields."""
        render_authoring(self.render_target, stem=model.stem, correct=correct_answer(model))
        self.render_target.bind("save", self.submit)

    def submit(self) -> Continuation:
        """Build a replacement model from the fields and send it to the host.

        Returns:
            The continuation the host will complete with the save outcome
        """
        stem = self.render_target.value("stem")
        correct = self.render_target.value("correct")
        model = build_model(stem, correct)

        event = ActivityEvent(name=MODEL_UPDATED)
        continuation = Continuation(
            callback=self.on_save_complete,
            correlation_id=event.event_id,
            name=MODEL_UPDATED,
        )
        event.detail = {"model": model, "continuation": continuation}

        logger.debug("Submitting model update %s", event.event_id[:8])
        self.dispatch_event(event)
        return continuation

    def on_save_complete(self, result: Any, error: Any) -> None:
        """Handle the host's answer to a model update.

        Only logs; override to surface save failures to the author.
        """
        if error:
            logger.error("Model update failed: %s", error)
        else:
            logger.info("Model update saved: %s", result)


__all__ = ["AuthoringSurface"]
