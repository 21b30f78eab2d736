"""
Rule Matcher — Decides whether one rule fires for one resource.

Three gates, all must pass:
  1. scenario:  rule scenario equals the requested one, or is inherited by it
  2. type:      exact / '*' / 'namespace/type/*' match, case-insensitive
  3. condition: optional dotted-path comparison; a missing field never fires

Pure function: no I/O, no state, never raises for a plausible record.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from typing import Any

from app.core.field_resolver import is_missing, resolve
from app.models.resource_models import ResourceRecord
from app.models.rule_models import ConditionOperator, Rule, RuleCondition, Scenario

WILDCARD = "*"
PREFIX_WILDCARD_SUFFIX = "/*"


def matches(record: ResourceRecord, rule: Rule, scenario: Scenario) -> bool:
    """Return True when `rule` fires for `record` under `scenario`."""
    if not scenario_matches(rule.scenario, scenario):
        return False
    if not type_matches(record.resource_type or "", rule.resource_type):
        return False
    if rule.condition is not None:
        return condition_matches(record.attributes, rule.condition)
    return True


def scenario_matches(rule_scenario: Scenario, requested: Scenario) -> bool:
    return requested.applies(rule_scenario)


def type_matches(resource_type: str, pattern: str) -> bool:
    """
    Case-insensitive type comparison.

    'microsoft.sql/*' matches 'microsoft.sql/servers' but not
    'microsoft.sqlvirtualmachine/...': the character after the prefix
    must be a '/' (or the end of the string).
    """
    res_type = resource_type.lower()
    rule_type = pattern.lower()

    if rule_type == WILDCARD or rule_type == res_type:
        return True

    if rule_type.endswith(PREFIX_WILDCARD_SUFFIX):
        prefix = rule_type[: -len(PREFIX_WILDCARD_SUFFIX)]
        if res_type.startswith(prefix):
            return len(res_type) == len(prefix) or res_type[len(prefix)] == "/"

    return False


def condition_matches(attributes: Mapping[str, Any], condition: RuleCondition) -> bool:
    value = resolve(attributes, condition.field)
    if is_missing(value):
        return False

    operator = condition.operator
    if operator is ConditionOperator.NON_EMPTY:
        return _is_container(value) and len(value) > 0

    actual = stringify(value).lower()
    expected = stringify(condition.value).lower()

    if operator is ConditionOperator.EQUALS:
        return actual == expected
    if operator is ConditionOperator.NOT_EQUALS:
        return actual != expected
    if operator is ConditionOperator.CONTAINS:
        return expected in actual

    # Unknown operator (only reachable with unvalidated rules)
    return False


def stringify(value: Any) -> str:
    """Render a JSON-ish value the way rule files write operands."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    return str(value)


def _is_container(value: Any) -> bool:
    return isinstance(value, (Collection, Mapping)) and not isinstance(
        value, (str, bytes, bytearray)
    )
