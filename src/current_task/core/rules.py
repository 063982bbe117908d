# src/current_task/core/rules.py

from __future__ import annotations

"""
Rule sets and the helpers shared by their evaluators.

Rule lists are ordered: evaluation is first-match-wins, never exhaustive.
A missing list (None) disables the feature; an empty list simply never matches.
"""

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from .conditions import Condition, match, parse_condition
from .snapshot import Snapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")

MESSAGE_PARAMETER_REGEX = re.compile(r"%\{\s*(\w+)\s*\}")


@dataclass(frozen=True, slots=True)
class CustomStateRule:
    condition: Condition
    resulting_status: str
    resulting_message: str


@dataclass(frozen=True, slots=True)
class AdvancedConfiguration:
    custom_state_rules: tuple[CustomStateRule, ...] | None = None
    nagging_conditions: tuple[Condition, ...] | None = None
    downtime_conditions: tuple[Condition, ...] | None = None

    @staticmethod
    def from_dict(raw: Mapping[str, Any] | None) -> AdvancedConfiguration:
        """
        Parse the JSON form:
            {"customStateRules": [{"condition": {...}, "resultingStatus": "...",
                                   "resultingMessage": "..."}],
             "naggingConditions": [{...}],
             "downtimeConditions": [{...}]}
        """
        if not raw:
            return AdvancedConfiguration()
        if not isinstance(raw, Mapping):
            logger.warning("Rules must be a JSON object, ignoring %r", raw)
            return AdvancedConfiguration()

        return AdvancedConfiguration(
            custom_state_rules=_parse_custom_state_rules(raw.get("customStateRules")),
            nagging_conditions=_parse_conditions(raw.get("naggingConditions"), "naggingConditions"),
            downtime_conditions=_parse_conditions(raw.get("downtimeConditions"), "downtimeConditions"),
        )


def _parse_conditions(raw: Any, name: str) -> tuple[Condition, ...] | None:
    if raw is None:
        return None
    if not isinstance(raw, list):
        logger.warning("%s must be a list, ignoring %r", name, raw)
        return None
    return tuple(parse_condition(c) for c in raw)


def _parse_custom_state_rules(raw: Any) -> tuple[CustomStateRule, ...] | None:
    if raw is None:
        return None
    if not isinstance(raw, list):
        logger.warning("customStateRules must be a list, ignoring %r", raw)
        return None

    rules: list[CustomStateRule] = []
    for item in raw:
        if not isinstance(item, Mapping):
            logger.warning("Skipping custom state rule that is not an object: %r", item)
            continue
        rules.append(
            CustomStateRule(
                condition=parse_condition(item.get("condition") or {}),
                resulting_status=str(item.get("resultingStatus", "ok")),
                resulting_message=str(item.get("resultingMessage", "")),
            )
        )
    return tuple(rules)


def first_matching(
        items: Sequence[T] | None,
        snapshot: Mapping[str, Any],
        condition_of: Callable[[T], Condition],
) -> T | None:
    """First item whose condition matches, or None (also when items is None)."""
    if not items:
        return None
    for item in items:
        if match(condition_of(item), snapshot):
            return item
    return None


def first_matching_condition(
        conditions: Iterable[Condition] | None,
        snapshot: Mapping[str, Any],
) -> Condition | None:
    return first_matching(tuple(conditions) if conditions else None, snapshot, lambda c: c)


def _format_value(value: Any) -> str:
    # Same rendering users see in the JSON state dump.
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_message(template: str, snapshot: Snapshot) -> str:
    """Replace %{fieldName} with snapshot values; unknown names stay verbatim."""

    def _sub(m: re.Match[str]) -> str:
        found, value = snapshot.lookup(m.group(1))
        return _format_value(value) if found else m.group(0)

    return MESSAGE_PARAMETER_REGEX.sub(_sub, template)
