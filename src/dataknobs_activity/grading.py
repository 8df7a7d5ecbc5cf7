"""Reference evaluation of submissions, as performed by a host.

Each part response is matched against its part's responses in order; the
first matching response supplies the score and feedback. Part attempts are
paired with model parts by their position in the attempt state.
"""

from __future__ import annotations

import logging
from typing import Dict

from dataknobs_activity.exceptions import NotFoundError, ValidationError
from dataknobs_activity.models import (
    AttemptState,
    Evaluation,
    EvaluationResult,
    Model,
    Part,
    SubmissionPayload,
)
from dataknobs_activity.rules import first_match

logger = logging.getLogger(__name__)


def evaluate(model: Model, state: AttemptState, payload: SubmissionPayload) -> EvaluationResult:
    """Grade a submission against ``model``.

    Args:
        model: The activity model holding the rules
        state: The attempt the payload belongs to
        payload: One entry per submitted part

    Returns:
        One evaluation per payload entry, in payload order

    Raises:
        NotFoundError: If an entry names a part attempt not in ``state``
        ValidationError: If the payload is empty, or if no response of a part
            matches its input
    """
    if not payload:
        raise ValidationError(
            "Submission payload is empty",
            context={"attempt_guid": state.attempt_guid},
        )

    parts_by_guid: Dict[str, Part] = {
        part_state.attempt_guid: part
        for part_state, part in zip(state.parts, model.parts)
    }

    evaluations = []
    for entry in payload:
        part = parts_by_guid.get(entry.attempt_guid)
        if part is None:
            raise NotFoundError(
                f"Unknown part attempt: {entry.attempt_guid}",
                context={"attempt_guid": state.attempt_guid, "part_attempt_guid": entry.attempt_guid},
            )

        matched = first_match(part.responses, entry.response.input)
        if matched is None:
            raise ValidationError(
                f"No response of part {part.id} matches the input",
                context={"part_id": part.id, "input": entry.response.input},
            )

        evaluations.append(
            Evaluation(
                attempt_guid=entry.attempt_guid,
                score=matched.score,
                out_of=max(response.score for response in part.responses),
                feedback=matched.feedback,
            )
        )
        logger.debug(
            "Part attempt %s scored %s with response %s",
            entry.attempt_guid,
            matched.score,
            matched.id,
        )

    return EvaluationResult(evaluations=evaluations)


__all__ = ["evaluate"]
