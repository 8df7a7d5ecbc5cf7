"""The attribute protocol between host and surface.

The host passes every value as a JSON-encoded string. Surfaces decode and
schema-check them on each render pass; nothing decoded is kept between
passes.

Example:
    ```python
    from dataknobs_activity.attributes import encode_attribute, read_model

    raw = encode_attribute(build_model("Q", 4))
    read_model(raw)
    # Model(stem='Q', ...)
    ```
"""

from __future__ import annotations

import json
from typing import Any, Callable, TypeVar

from dataknobs_activity.exceptions import ValidationError
from dataknobs_activity.models import AttemptState, Model
from dataknobs_activity.schema import parse_graded, parse_model, parse_state


T = TypeVar("T")

MODEL = "model"
STATE = "state"
GRADED = "graded"


def encode_attribute(value: Any) -> str:
    """Serialize a value for use as an attribute string.

    Objects with a ``to_dict`` method are converted first.
    """
    if hasattr(value, "to_dict"):
        value = value.to_dict()
    return json.dumps(value)


def decode_attribute(name: str, raw: str | None) -> Any:
    """Decode a JSON attribute string.

    Raises:
        ValidationError: If the attribute is missing or is not valid JSON
    """
    if raw is None:
        raise ValidationError(
            f"Missing required attribute '{name}'",
            context={"attribute": name, "violations": [f"{name}: attribute is required"]},
        )
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(
            f"Attribute '{name}' is not valid JSON: {e}",
            context={"attribute": name, "violations": [f"{name}: expected JSON text"]},
        ) from e


def _read(name: str, raw: str | None, parse: Callable[[Any], T]) -> T:
    data = decode_attribute(name, raw)
    try:
        return parse(data)
    except ValidationError as e:
        e.context.setdefault("attribute", name)
        raise


def read_model(raw: str | None) -> Model:
    """Decode and validate the ``model`` attribute."""
    return _read(MODEL, raw, parse_model)


def read_state(raw: str | None) -> AttemptState:
    """Decode and validate the ``state`` attribute."""
    return _read(STATE, raw, parse_state)


def read_graded(raw: str | None) -> bool:
    """Decode and validate the ``graded`` attribute."""
    return _read(GRADED, raw, parse_graded)


__all__ = [
    "MODEL",
    "STATE",
    "GRADED",
    "encode_attribute",
    "decode_attribute",
    "read_model",
    "read_state",
    "read_graded",
]
