# src/current_task/core/conditions.py

from __future__ import annotations

"""
Condition language.

Conditions are user-authored JSON trees, e.g.:

    {"hours": {"fromUntil": [22, 8]}, "not": {"status": "ok"}, "or": [...]}

Every key except "not"/"or" names a snapshot field and carries a value condition:
- a literal (strict equality), or
- an operator object with any of "any", "multipleOf", "fromUntil" (all must pass).

Parsing happens once (when the configuration is loaded). Matching is pure and total:
unknown fields and malformed operators never raise, they just don't match.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

_MISSING = object()
_OPERATORS = frozenset({"any", "multipleOf", "fromUntil"})


@dataclass(frozen=True, slots=True)
class ValueCondition:
    """Condition on a single snapshot value."""

    literal: Any = _MISSING
    any_of: tuple[Any, ...] | None = None
    multiple_of: int | float | None = None
    from_until: tuple[Any, Any] | None = None
    malformed: bool = False

    @property
    def is_literal(self) -> bool:
        return self.literal is not _MISSING


@dataclass(frozen=True, slots=True)
class Condition:
    value_conditions: dict[str, ValueCondition]
    not_condition: Condition | None = None
    or_conditions: tuple[Condition, ...] | None = None


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def strict_equals(a: Any, b: Any) -> bool:
    """Equality without coercion: True != 1, "1" != 1, but 1 == 1.0."""
    if _is_number(a) and _is_number(b):
        return a == b
    if type(a) is not type(b):
        return False
    return a == b


def parse_value_condition(raw: Any) -> ValueCondition:
    if not isinstance(raw, (Mapping, list, tuple)):
        return ValueCondition(literal=raw)

    if not isinstance(raw, Mapping):
        logger.warning("Value condition must be a literal or an object, got %r", raw)
        return ValueCondition(malformed=True)

    unknown = set(raw) - _OPERATORS
    if unknown:
        logger.warning("Unknown value condition operator(s) %s", sorted(unknown))
        return ValueCondition(malformed=True)

    any_of = None
    multiple_of = None
    from_until = None
    malformed = False

    if "any" in raw:
        if isinstance(raw["any"], (list, tuple)):
            any_of = tuple(raw["any"])
        else:
            logger.warning("'any' must be a list, got %r", raw["any"])
            malformed = True

    if "multipleOf" in raw:
        d = raw["multipleOf"]
        if _is_number(d) and d != 0:
            multiple_of = d
        else:
            logger.warning("'multipleOf' must be a non-zero number, got %r", d)
            malformed = True

    if "fromUntil" in raw:
        fu = raw["fromUntil"]
        if isinstance(fu, (list, tuple)) and len(fu) == 2 and all(_is_number(x) for x in fu):
            from_until = (fu[0], fu[1])
        else:
            logger.warning("'fromUntil' must be a [start, end] pair of numbers, got %r", fu)
            malformed = True

    return ValueCondition(
        any_of=any_of,
        multiple_of=multiple_of,
        from_until=from_until,
        malformed=malformed,
    )


def parse_condition(raw: Mapping[str, Any]) -> Condition:
    """Build a Condition from its JSON form. Never raises for bad operators."""
    if not isinstance(raw, Mapping):
        logger.warning("Condition must be an object, got %r", raw)
        # A condition on a field that cannot exist never matches.
        return Condition(value_conditions={"": ValueCondition(malformed=True)})

    not_condition = None
    or_conditions = None
    value_conditions: dict[str, ValueCondition] = {}

    for key, value in raw.items():
        if key == "not":
            not_condition = parse_condition(value)
        elif key == "or":
            if isinstance(value, (list, tuple)):
                or_conditions = tuple(parse_condition(c) for c in value)
            else:
                logger.warning("'or' must be a list of conditions, got %r", value)
                or_conditions = ()
        else:
            value_conditions[str(key)] = parse_value_condition(value)

    return Condition(
        value_conditions=value_conditions,
        not_condition=not_condition,
        or_conditions=or_conditions,
    )


def _match_from_until(from_until: tuple[Any, Any], value: Any) -> bool:
    start, end = from_until
    if start < end:
        return start <= value < end
    # Wraps around, e.g. hours [22, 8) or minutes [50, 10).
    return value >= start or value < end


def match_value(vc: ValueCondition, value: Any) -> bool:
    if vc.malformed or value is _MISSING:
        return False

    if vc.is_literal:
        return strict_equals(value, vc.literal)

    if vc.any_of is not None and not any(strict_equals(value, x) for x in vc.any_of):
        return False

    if vc.multiple_of is not None and (not _is_number(value) or value % vc.multiple_of != 0):
        return False

    if vc.from_until is not None and (
        not _is_number(value) or not _match_from_until(vc.from_until, value)
    ):
        return False

    return True


def match(condition: Condition, snapshot: Mapping[str, Any]) -> bool:
    for key, vc in condition.value_conditions.items():
        if not match_value(vc, snapshot.get(key, _MISSING)):
            return False

    if condition.not_condition is not None and match(condition.not_condition, snapshot):
        return False

    if condition.or_conditions is not None and not any(
        match(c, snapshot) for c in condition.or_conditions
    ):
        return False

    return True


class ConditionMatcher:
    """Stateless matcher object, handy to inject where a collaborator expects one."""

    def match(self, condition: Condition, snapshot: Mapping[str, Any]) -> bool:
        return match(condition, snapshot)
