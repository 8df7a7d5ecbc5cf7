"""View layer for the sample surfaces.

The markup produced here is an internal detail of each surface; hosts must
not depend on its structure. A :class:`RenderTarget` stands in for the mount
point: it holds the rendered HTML, the editable field values, and the
controls bound to surface actions.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

import jinja2

from dataknobs_activity.exceptions import NotFoundError

logger = logging.getLogger(__name__)

_env = jinja2.Environment(
    # Stem text is author supplied
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=jinja2.StrictUndefined,
)

AUTHORING_TEMPLATE = _env.from_string(
    """<div style="margin: 50px;">
  <p>What question would you like to pose to the student?</p>
  <input type="text" id="stem" value="{{ stem }}">
  <p>What is the correct answer?</p>
  <input type="number" id="correct" value="{{ correct }}">
  <div><button class="btn btn-primary" id="save">Save Changes</button></div>
</div>
"""
)

DELIVERY_TEMPLATE = _env.from_string(
    """<div>
  <p>{{ stem }}</p>
{% for input_id in input_ids %}
  <input type="number" id="{{ input_id }}">
{% endfor %}
  <div><button id="submit" class="btn btn-primary">Submit</button></div>
</div>
"""
)


class RenderTarget:
    """The container a surface renders into.

    Attributes:
        html: Markup from the last render
        fields: Current value of each editable field, by field id
        controls: Actions bound to each control, by control id
    """

    def __init__(self) -> None:
        self.html = ""
        self.fields: Dict[str, str] = {}
        self.controls: Dict[str, Callable[[], Any]] = {}
        self.render_count = 0

    def clear(self) -> None:
        """Drop all previously rendered content and bindings."""
        self.html = ""
        self.fields = {}
        self.controls = {}

    def replace(self, html: str, fields: Dict[str, str]) -> None:
        """Replace the whole contents with freshly rendered markup."""
        self.clear()
        self.html = html
        self.fields = dict(fields)
        self.render_count += 1

    def bind(self, control: str, action: Callable[[], Any]) -> None:
        self.controls[control] = action

    def click(self, control: str) -> Any:
        """Trigger the action bound to ``control`` and return its result.

        Raises:
            NotFoundError: If no such control is rendered
        """
        if control not in self.controls:
            raise NotFoundError(
                f"Control not found: {control}",
                context={"control": control, "available": sorted(self.controls)},
            )
        return self.controls[control]()

    def set_value(self, field_id: str, value: str) -> None:
        """Simulate a user editing a field.

        Raises:
            NotFoundError: If no such field is rendered
        """
        if field_id not in self.fields:
            raise NotFoundError(
                f"Field not found: {field_id}",
                context={"field": field_id, "available": sorted(self.fields)},
            )
        self.fields[field_id] = value

    def value(self, field_id: str) -> str:
        """Current value of a field, or empty string when it is not rendered."""
        return self.fields.get(field_id, "")


def render_authoring(target: RenderTarget, stem: str, correct: str) -> None:
    """Render the authoring form with ``stem`` and ``correct`` fields."""
    html = AUTHORING_TEMPLATE.render(stem=stem, correct=correct)
    target.replace(html, {"stem": stem, "correct": correct})


def render_delivery(
    target: RenderTarget,
    stem: str,
    input_ids: List[str],
) -> None:
    """Render the prompt with one empty input per id."""
    html = DELIVERY_TEMPLATE.render(stem=stem, input_ids=input_ids)
    target.replace(html, {input_id: "" for input_id in input_ids})
    logger.debug("Rendered delivery view with %d inputs", len(input_ids))


__all__ = ["RenderTarget", "render_authoring", "render_delivery"]
