"""Schema checks for values crossing the host/plugin boundary.

The ``parse_*`` functions validate raw decoded data against the pydantic
models in :mod:`dataknobs_activity.models` and either return the typed value
or raise :class:`~dataknobs_activity.exceptions.ValidationError` listing every
violation as ``"<path>: <message>"``. The ``check_*`` functions return those
violations instead of raising.

Example:
    ```python
    from dataknobs_activity.schema import parse_model

    try:
        model = parse_model({"stem": "Q"})
    except ValidationError as e:
        e.violations
        # ['authoring: Field required']
    ```
"""

from __future__ import annotations

from typing import Any, Callable, List, TypeVar

from pydantic import StrictBool, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from dataknobs_activity.exceptions import ValidationError
from dataknobs_activity.models import AttemptState, EvaluationResult, Model

T = TypeVar("T")

_GRADED = TypeAdapter(StrictBool)


def violations_of(error: PydanticValidationError, root: str) -> List[str]:
    """Format pydantic errors as ``"<path>: <message>"`` strings.

    Args:
        error: The pydantic validation error
        root: Path label used for errors on the value itself
    """
    violations = []
    for detail in error.errors():
        field_path = ".".join(str(loc) for loc in detail["loc"]) or root
        message = detail["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        violations.append(f"{field_path}: {message}")
    return violations


def _validate(what: str, root: str, validate: Callable[[Any], T], data: Any) -> T:
    try:
        return validate(data)
    except PydanticValidationError as e:
        violations = violations_of(e, root)
        raise ValidationError(
            f"Invalid {what}: " + "; ".join(violations),
            context={"violations": violations, "kind": what},
        ) from e


def _violations(parse, data: Any) -> List[str]:
    try:
        parse(data)
    except ValidationError as e:
        return e.violations
    return []


def parse_model(data: Any) -> Model:
    """Validate raw data and build a :class:`Model`.

    Raises:
        ValidationError: If the data does not have the model shape
    """
    return _validate("model", "model", Model.model_validate, data)


def parse_state(data: Any) -> AttemptState:
    """Validate raw data and build an :class:`AttemptState`.

    Raises:
        ValidationError: If the data does not have the attempt state shape
    """
    return _validate("state", "state", AttemptState.model_validate, data)


def parse_graded(data: Any) -> bool:
    """Validate the graded flag.

    Raises:
        ValidationError: If the value is not a boolean
    """
    return _validate("graded", "graded", _GRADED.validate_python, data)


def parse_evaluation_result(data: Any) -> EvaluationResult:
    """Validate raw data and build an :class:`EvaluationResult`.

    Each evaluation needs only ``feedback.content``. An
    :class:`EvaluationResult` instance is returned unchanged.

    Raises:
        ValidationError: If the data does not have the evaluation result shape
    """
    return _validate("evaluation result", "result", EvaluationResult.model_validate, data)


def check_model(data: Any) -> List[str]:
    """Return the shape violations of a raw model."""
    return _violations(parse_model, data)


def check_state(data: Any) -> List[str]:
    """Return the shape violations of a raw attempt state."""
    return _violations(parse_state, data)


def check_evaluation_result(data: Any) -> List[str]:
    """Return the shape violations of a raw evaluation result."""
    return _violations(parse_evaluation_result, data)


__all__ = [
    "violations_of",
    "check_model",
    "check_state",
    "check_evaluation_result",
    "parse_model",
    "parse_state",
    "parse_graded",
    "parse_evaluation_result",
]
