"""Response rules understood by this activity.

Only the two rule forms produced by :func:`dataknobs_activity.builder.build_model`
are supported:

- ``input = {value}``: equality with ``value``. Compared numerically when both
  sides parse as numbers, otherwise as exact strings.
- ``input like {pattern}``: full regular-expression match. ``input like {.*}``
  is the catch-all.

Responses are evaluated in order and the first match wins.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from dataknobs_activity.exceptions import ValidationError

if TYPE_CHECKING:
    from dataknobs_activity.models import Response

logger = logging.getLogger(__name__)

_RULE_PATTERN = re.compile(r"^\s*input\s+(=|like)\s+\{(.*)\}\s*$", re.DOTALL)

CATCH_ALL_PATTERN = ".*"


class RuleKind(Enum):
    """Supported rule operators."""

    EQUALS = "="
    LIKE = "like"


@dataclass(frozen=True)
class Rule:
    """A parsed response rule."""

    kind: RuleKind
    operand: str

    def __str__(self) -> str:
        return f"input {self.kind.value} {{{self.operand}}}"


def equals_rule(value: object) -> str:
    """Build the rule string matching input equal to ``value``."""
    return str(Rule(RuleKind.EQUALS, str(value)))


def catch_all_rule() -> str:
    """Build the rule string matching any input."""
    return str(Rule(RuleKind.LIKE, CATCH_ALL_PATTERN))


def parse_rule(rule: str) -> Rule:
    """Parse a rule string.

    Args:
        rule: Rule text such as ``"input = {4}"``

    Returns:
        The parsed rule

    Raises:
        ValidationError: If the rule is not one of the supported forms
    """
    match = _RULE_PATTERN.match(rule)
    if match is None:
        raise ValidationError(
            f"Unsupported rule: {rule!r}",
            context={"rule": rule, "supported": ["input = {value}", "input like {pattern}"]},
        )
    return Rule(kind=RuleKind(match.group(1)), operand=match.group(2))


def is_catch_all(rule: str) -> bool:
    """Whether ``rule`` matches every input."""
    try:
        parsed = parse_rule(rule)
    except ValidationError:
        return False
    return parsed.kind is RuleKind.LIKE and parsed.operand == CATCH_ALL_PATTERN


def _as_number(text: str) -> float | None:
    try:
        return float(text)
    except ValueError:
        return None


def rule_matches(rule: str | Rule, value: str) -> bool:
    """Check whether learner input ``value`` satisfies ``rule``."""
    parsed = parse_rule(rule) if isinstance(rule, str) else rule

    if parsed.kind is RuleKind.LIKE:
        try:
            return re.fullmatch(parsed.operand, value, re.DOTALL) is not None
        except re.error as e:
            raise ValidationError(
                f"Invalid pattern in rule: {parsed}",
                context={"rule": str(parsed), "error": str(e)},
            ) from e

    expected = parsed.operand.strip()
    actual = value.strip()
    expected_number = _as_number(expected)
    actual_number = _as_number(actual)
    if expected_number is not None and actual_number is not None:
        return expected_number == actual_number
    return expected == actual


def first_match(responses: Iterable[Response], value: str) -> Response | None:
    """Return the first response whose rule matches ``value``."""
    for response in responses:
        if rule_matches(response.rule, value):
            logger.debug("Input %r matched response %s", value, response.id)
            return response
    return None


__all__ = [
    "RuleKind",
    "Rule",
    "CATCH_ALL_PATTERN",
    "equals_rule",
    "catch_all_rule",
    "parse_rule",
    "is_catch_all",
    "rule_matches",
    "first_match",
]
