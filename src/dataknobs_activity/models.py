"""Data model shared by the surfaces and the host.

The host owns every value defined here. Surfaces only hold transient copies
parsed from attributes on each render pass, and never mutate them; every
model is frozen.

Wire dictionaries use the host's camelCase keys (``scoringStrategy``,
``attemptGuid``, ``outOf``). Fields are declared with those aliases, and
Python code may populate them by field name as well. Every construction path
validates; :mod:`dataknobs_activity.schema` turns the resulting errors into a
:class:`~dataknobs_activity.exceptions.ValidationError`.

Example:
    ```python
    from dataknobs_activity.models import Model

    model = Model.from_dict(json.loads(raw))
    model.parts[0].responses[0].rule
    # 'input = {4}'
    ```
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from dataknobs_activity.exceptions import ValidationError
from dataknobs_activity.rules import is_catch_all, parse_rule


class WireModel(BaseModel):
    """Base for values exchanged with the host as camelCase dictionaries."""

    model_config = {"populate_by_name": True, "frozen": True}

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        return cls.model_validate(data)


class ScoringStrategy(str, Enum):
    """How a part's score is derived across its attempts."""

    AVERAGE = "average"
    BEST = "best"
    MOST_RECENT = "most_recent"


class EvaluationFeedback(WireModel):
    """Feedback as returned with an evaluation; only the content is required."""

    content: str
    id: Optional[str] = None


class Feedback(EvaluationFeedback):
    """Feedback shown to a learner when a response matches."""

    id: str


class Hint(WireModel):
    """A hint attached to a part."""

    id: str
    content: str


class Response(WireModel):
    """A matching rule plus the outcome applied when it matches.

    Attributes:
        id: Response identifier, unique within its part
        rule: Rule string matched against learner input
        score: Score awarded on match
        feedback: Feedback presented on match
    """

    id: str
    rule: str
    score: float
    feedback: Feedback

    @field_validator("rule")
    @classmethod
    def validate_rule(cls, v: str) -> str:
        """Ensure the rule is one of the supported forms."""
        try:
            parse_rule(v)
        except ValidationError as e:
            raise ValueError(f"unsupported rule {v!r}") from e
        return v

    @field_validator("score", mode="before")
    @classmethod
    def validate_score(cls, v: Any) -> Any:
        """Reject booleans and strings that lax float coercion would accept."""
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("expected a number")
        return v


class Part(WireModel):
    """A scoring unit of an activity.

    Responses are evaluated in order and the first match wins, so there is
    exactly one catch-all response and it is last, after at least one
    correct-answer rule.
    """

    id: str
    scoring_strategy: ScoringStrategy = Field(alias="scoringStrategy")
    responses: List[Response] = Field(min_length=1)
    hints: List[Hint] = Field(default_factory=list)

    @field_validator("responses")
    @classmethod
    def validate_response_order(cls, v: List[Response]) -> List[Response]:
        """Ensure a single catch-all closes the response list."""
        catch_alls = [i for i, response in enumerate(v) if is_catch_all(response.rule)]
        if len(catch_alls) != 1:
            raise ValueError(f"expected exactly one catch-all response, found {len(catch_alls)}")
        if catch_alls[0] != len(v) - 1:
            raise ValueError("the catch-all response must be last")
        if len(v) < 2:
            raise ValueError("expected a correct-answer rule before the catch-all")
        return v


class Authoring(WireModel):
    """Author-only section of a model."""

    parts: List[Part]

    @field_validator("parts")
    @classmethod
    def validate_single_part(cls, v: List[Part]) -> List[Part]:
        if len(v) != 1:
            raise ValueError(f"expected exactly one part, found {len(v)}")
        return v


class Model(WireModel):
    """The authored content definition of one activity instance.

    Attributes:
        stem: The prompt posed to the learner
        authoring: Parts with their scoring rules
    """

    stem: str
    authoring: Authoring

    @property
    def parts(self) -> List[Part]:
        """Shortcut for ``authoring.parts``."""
        return self.authoring.parts


class PartState(WireModel):
    """Per-part attempt state.

    Keys other than ``attemptGuid`` are kept as extra fields and written back
    unchanged, since the host may attach its own bookkeeping.
    """

    model_config = {"extra": "allow"}

    attempt_guid: str = Field(alias="attemptGuid")

    @property
    def extra(self) -> Dict[str, Any]:
        """Host keys carried alongside the declared fields."""
        return dict(self.model_extra or {})


class AttemptState(WireModel):
    """State of a learner's current attempt, owned by the host."""

    model_config = {"extra": "allow"}

    attempt_guid: str = Field(alias="attemptGuid")
    parts: List[PartState] = Field(min_length=1)

    @property
    def extra(self) -> Dict[str, Any]:
        """Host keys carried alongside the declared fields."""
        return dict(self.model_extra or {})


class StudentResponse(WireModel):
    """The learner's raw input for one part."""

    input: str


class PartResponse(WireModel):
    """One entry of a submission payload, keyed by the part attempt guid."""

    attempt_guid: str = Field(alias="attemptGuid")
    response: StudentResponse


SubmissionPayload = List[PartResponse]


class Evaluation(WireModel):
    """The host's evaluation of one part response.

    Hosts may return only the feedback; the other fields are informational.
    """

    feedback: EvaluationFeedback
    attempt_guid: Optional[str] = Field(default=None, alias="attemptGuid")
    score: Optional[float] = None
    out_of: Optional[float] = Field(default=None, alias="outOf")


class EvaluationResult(WireModel):
    """Result returned by the host after a submission is graded."""

    evaluations: List[Evaluation] = Field(min_length=1)


__all__ = [
    "WireModel",
    "ScoringStrategy",
    "EvaluationFeedback",
    "Feedback",
    "Hint",
    "Response",
    "Part",
    "Authoring",
    "Model",
    "PartState",
    "AttemptState",
    "StudentResponse",
    "PartResponse",
    "SubmissionPayload",
    "Evaluation",
    "EvaluationResult",
]
