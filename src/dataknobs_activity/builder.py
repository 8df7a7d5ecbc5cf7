"""Construction of well-formed models from primitive author inputs.

Shared by the authoring surface, the delivery test mode and the creation
function. Feedback text is canned and no hints are offered.

Example:
    ```python
    from dataknobs_activity.builder import build_model, correct_answer

    model = build_model("What is two plus two?", 4)
    model.parts[0].responses[0].rule
    # 'input = {4}'
    correct_answer(model)
    # '4'
    ```
"""

from __future__ import annotations

from dataknobs_activity.models import (
    Authoring,
    Feedback,
    Model,
    Part,
    Response,
    ScoringStrategy,
)
from dataknobs_activity.rules import catch_all_rule, equals_rule, parse_rule

PART_ID = "1"
CORRECT_FEEDBACK = "Correct"
INCORRECT_FEEDBACK = "Incorrect"


def build_model(stem: str, correct: object) -> Model:
    """Build a single-part model with a correct rule and a catch-all.

    The result is always a complete replacement model, never a patch. Ids
    are fixed literals, so equal inputs give equal models.

    Args:
        stem: The question posed to the learner
        correct: The correct answer; rendered with ``str()`` into the rule

    Returns:
        A new model
    """
    return Model(
        stem=stem,
        authoring=Authoring(
            parts=[
                Part(
                    id=PART_ID,
                    scoring_strategy=ScoringStrategy.AVERAGE,
                    responses=[
                        Response(
                            id="response1",
                            rule=equals_rule(correct),
                            score=1,
                            feedback=Feedback(id="feedback1", content=CORRECT_FEEDBACK),
                        ),
                        Response(
                            id="response2",
                            rule=catch_all_rule(),
                            score=0,
                            feedback=Feedback(id="feedback2", content=INCORRECT_FEEDBACK),
                        ),
                    ],
                    hints=[],
                )
            ]
        ),
    )


def correct_answer(model: Model) -> str:
    """Extract the correct answer from the first response of the first part."""
    return parse_rule(model.parts[0].responses[0].rule).operand


__all__ = ["build_model", "correct_answer", "CORRECT_FEEDBACK", "INCORRECT_FEEDBACK"]
